"""
Tests for the appointment lifecycle.

Business rules:
- Exactly one of patientId / customPatientName is stored; patientId wins
- Status defaults to BOOKED; transitions are unconstrained
- Lists sort by date, newest first, with inclusive from/to bounds
"""
import pytest

from clinic_admin.extensions import db
from clinic_admin.models import Appointment


def _create(client, **payload):
    return client.post('/api/appointments', json=payload)


class TestCreateAppointment:

    def test_guest_appointment_defaults_to_booked(self, staff_client, service_id):
        response = _create(
            staff_client, patientName='  Guest A  ', serviceId=service_id, date='2026-03-01T09:30:00Z'
        )

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['status'] == 'BOOKED'
        assert data['patientId'] is None
        assert data['customPatientName'] == 'Guest A'
        assert data['service'] == {'id': service_id, 'name': 'Consultation'}
        assert data['date'] == '2026-03-01T09:30:00+00:00'

    def test_patient_wins_over_guest_name(self, staff_client, service_id, patient_id):
        response = _create(
            staff_client,
            patientId=patient_id,
            patientName='Someone Else',
            serviceId=service_id,
            date='2026-03-01T09:30:00Z',
        )

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['patientId'] == patient_id
        assert data['customPatientName'] is None
        assert data['patient'] == {'id': patient_id, 'firstName': 'Jane', 'lastName': 'Doe'}

    @pytest.mark.parametrize('name', [None, '', '   '])
    def test_neither_patient_nor_name_is_rejected(self, staff_client, service_id, name):
        response = _create(staff_client, patientName=name, serviceId=service_id, date='2026-03-01T09:30:00Z')

        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'Validation failed.'
        assert body['details'] == [{'field': 'patientId', 'message': 'Provide a patient or enter a name.'}]

    def test_invalid_date_is_rejected(self, staff_client, service_id):
        response = _create(staff_client, patientName='Guest', serviceId=service_id, date='not-a-date')

        assert response.status_code == 400
        assert any(d['field'] == 'date' for d in response.get_json()['details'])

    def test_unknown_service_is_integrity_error(self, staff_client):
        response = _create(staff_client, patientName='Guest', serviceId='missing', date='2026-03-01T09:30:00Z')

        assert response.status_code == 400
        assert 'Service not found' in response.get_json()['error']

    def test_staff_assignment(self, staff_client, staff_user, service_id):
        response = _create(
            staff_client, patientName='Guest', serviceId=service_id, staffId=staff_user,
            date='2026-03-01T09:30:00Z', status='COMPLETED',
        )

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['staff'] == {'id': staff_user, 'name': 'Staff'}
        assert data['status'] == 'COMPLETED'

    def test_unknown_status_is_rejected(self, staff_client, service_id):
        response = _create(
            staff_client, patientName='Guest', serviceId=service_id, date='2026-03-01T09:30:00Z', status='DONE'
        )
        assert response.status_code == 400

    def test_create_then_read_returns_same_record(self, staff_client, service_id):
        created = _create(
            staff_client, patientName='Guest', serviceId=service_id, date='2026-03-01T09:30:00Z', notes='First visit'
        ).get_json()['data']

        response = staff_client.get(f"/api/appointments/{created['id']}")

        assert response.status_code == 200
        assert response.get_json()['data'] == created


class TestUpdateAppointment:

    @pytest.fixture
    def guest_appointment(self, staff_client, service_id):
        return _create(
            staff_client, patientName='Guest A', serviceId=service_id, date='2026-03-01T09:30:00Z'
        ).get_json()['data']

    def test_linking_patient_clears_guest_name(self, staff_client, guest_appointment, patient_id):
        response = staff_client.patch(
            f"/api/appointments/{guest_appointment['id']}", json={'patientId': patient_id}
        )

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['patientId'] == patient_id
        assert data['customPatientName'] is None

    def test_unlinking_patient_with_new_guest_name(self, staff_client, service_id, patient_id):
        created = _create(
            staff_client, patientId=patient_id, serviceId=service_id, date='2026-03-01T09:30:00Z'
        ).get_json()['data']

        response = staff_client.patch(
            f"/api/appointments/{created['id']}", json={'patientId': None, 'patientName': ' Walk In '}
        )

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['patientId'] is None
        assert data['customPatientName'] == 'Walk In'

    def test_unlinking_patient_without_name_is_rejected(self, app, staff_client, service_id, patient_id):
        created = _create(
            staff_client, patientId=patient_id, serviceId=service_id, date='2026-03-01T09:30:00Z'
        ).get_json()['data']

        response = staff_client.patch(f"/api/appointments/{created['id']}", json={'patientId': ''})

        assert response.status_code == 400
        with app.app_context():
            assert db.session.get(Appointment, created['id']).patient_id == patient_id

    def test_status_can_move_anywhere(self, staff_client, guest_appointment):
        url = f"/api/appointments/{guest_appointment['id']}"
        for status in ('CANCELLED', 'BOOKED', 'NO_SHOW', 'COMPLETED'):
            response = staff_client.patch(url, json={'status': status})
            assert response.status_code == 200
            assert response.get_json()['data']['status'] == status

    def test_staff_can_be_unassigned(self, staff_client, staff_user, guest_appointment):
        url = f"/api/appointments/{guest_appointment['id']}"
        staff_client.patch(url, json={'staffId': staff_user})

        response = staff_client.patch(url, json={'staffId': None})

        assert response.status_code == 200
        assert response.get_json()['data']['staffId'] is None

    def test_untouched_fields_survive(self, staff_client, guest_appointment):
        response = staff_client.patch(
            f"/api/appointments/{guest_appointment['id']}", json={'notes': 'Bring results'}
        )

        data = response.get_json()['data']
        assert data['notes'] == 'Bring results'
        assert data['customPatientName'] == 'Guest A'
        assert data['date'] == guest_appointment['date']

    def test_update_missing_is_404(self, staff_client):
        response = staff_client.patch('/api/appointments/nope', json={'notes': 'x'})
        assert response.status_code == 404


class TestDeleteAppointment:

    def test_delete(self, staff_client, service_id):
        created = _create(
            staff_client, patientName='Guest', serviceId=service_id, date='2026-03-01T09:30:00Z'
        ).get_json()['data']

        response = staff_client.delete(f"/api/appointments/{created['id']}")

        assert response.status_code == 200
        assert response.get_json() == {'success': True, 'ok': True}
        assert staff_client.get(f"/api/appointments/{created['id']}").status_code == 404

    def test_delete_missing_is_404(self, staff_client):
        assert staff_client.delete('/api/appointments/does-not-exist').status_code == 404


class TestListAppointments:

    @pytest.fixture
    def booked(self, staff_client, service_id, patient_id):
        dates = ['2026-01-10T10:00:00Z', '2026-02-10T10:00:00Z', '2026-03-10T10:00:00Z']
        ids = []
        for index, date in enumerate(dates):
            payload = {'serviceId': service_id, 'date': date}
            if index == 0:
                payload['patientId'] = patient_id
            else:
                payload['patientName'] = f'Guest {index}'
            ids.append(_create(staff_client, **payload).get_json()['data']['id'])
        staff_client.patch(f'/api/appointments/{ids[2]}', json={'status': 'CANCELLED'})
        return ids

    def test_newest_first(self, staff_client, booked):
        data = staff_client.get('/api/appointments').get_json()['data']
        assert [a['id'] for a in data] == list(reversed(booked))

    def test_filters(self, staff_client, booked, patient_id):
        by_status = staff_client.get('/api/appointments?status=CANCELLED').get_json()['data']
        assert [a['id'] for a in by_status] == [booked[2]]

        by_patient = staff_client.get(f'/api/appointments?patientId={patient_id}').get_json()['data']
        assert [a['id'] for a in by_patient] == [booked[0]]

    def test_date_bounds_are_inclusive(self, staff_client, booked):
        response = staff_client.get(
            '/api/appointments?from=2026-01-10T10:00:00Z&to=2026-02-10T10:00:00Z'
        )
        assert [a['id'] for a in response.get_json()['data']] == [booked[1], booked[0]]

    @pytest.mark.parametrize('query', ['status=DONE', 'from=yesterday', 'to=2026-13-45'])
    def test_invalid_filters_are_rejected(self, staff_client, query):
        assert staff_client.get(f'/api/appointments?{query}').status_code == 400
