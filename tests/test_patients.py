"""
Tests for patients and the service usage reconciler.

Business rules:
- serviceIds on create gives one usage row per distinct service
- serviceIds on update replaces the set; retained rows keep usedAt
- Unknown service ids fail the whole update
- Deleting a patient keeps their appointments as guest bookings
"""

from clinic_admin.extensions import db
from clinic_admin.models import Appointment, PatientAccount, PatientServiceUsage


def _usages(app, patient_id):
    with app.app_context():
        rows = PatientServiceUsage.query.filter_by(patient_id=patient_id).all()
        return {row.service_id: row.used_at for row in rows}


class TestCreatePatient:

    def test_create_with_duplicate_service_ids(self, app, staff_client, make_service):
        svc1, svc2 = make_service('Cleaning'), make_service('Whitening')

        response = staff_client.post('/api/patients', json={
            'firstName': ' Jane ',
            'lastName': 'Doe',
            'email': 'jane@example.com',
            'serviceIds': [svc1, svc2, svc1],
        })

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['firstName'] == 'Jane'
        assert sorted(u['serviceId'] for u in data['serviceUsages']) == sorted([svc1, svc2])
        assert set(_usages(app, data['id'])) == {svc1, svc2}

    def test_missing_names_are_rejected(self, staff_client):
        response = staff_client.post('/api/patients', json={'firstName': '', 'email': 'x@example.com'})

        assert response.status_code == 400
        fields = {d['field'] for d in response.get_json()['details']}
        assert {'firstName', 'lastName'} <= fields

    def test_short_phone_and_bad_email_are_rejected(self, staff_client):
        response = staff_client.post('/api/patients', json={
            'firstName': 'A', 'lastName': 'B', 'phone': '123', 'email': 'not-an-email',
        })

        assert response.status_code == 400
        fields = {d['field'] for d in response.get_json()['details']}
        assert {'phone', 'email'} <= fields

    def test_duplicate_email_is_conflict(self, staff_client, make_patient):
        make_patient(email='jane@example.com')

        response = staff_client.post('/api/patients', json={
            'firstName': 'Other', 'lastName': 'Person', 'email': 'jane@example.com',
        })

        assert response.status_code == 409
        assert response.get_json() == {
            'success': False, 'error': 'Email already in use.', 'field': 'email',
        }

    def test_duplicate_phone_is_conflict(self, staff_client, make_patient):
        make_patient(phone='5550100')

        response = staff_client.post('/api/patients', json={
            'firstName': 'Other', 'lastName': 'Person', 'phone': '5550100',
        })

        assert response.status_code == 409
        assert response.get_json()['error'] == 'Phone number already in use.'

    def test_unknown_service_creates_nothing(self, app, staff_client):
        response = staff_client.post('/api/patients', json={
            'firstName': 'Jane', 'lastName': 'Doe', 'serviceIds': ['ghost'],
        })

        assert response.status_code == 400
        assert 'ghost' in response.get_json()['error']
        assert staff_client.get('/api/patients').get_json()['data'] == []


class TestReconcileServiceUsages:

    def test_jane_doe_scenario(self, app, staff_client, make_service):
        svc1, svc2, svc3 = make_service('One'), make_service('Two'), make_service('Three')
        patient = staff_client.post('/api/patients', json={
            'firstName': 'Jane', 'lastName': 'Doe', 'serviceIds': [svc1, svc2],
        }).get_json()['data']
        before = _usages(app, patient['id'])

        response = staff_client.patch(f"/api/patients/{patient['id']}", json={'serviceIds': [svc2, svc3]})

        assert response.status_code == 200
        after = _usages(app, patient['id'])
        assert set(after) == {svc2, svc3}
        assert after[svc2] == before[svc2]

    def test_omitted_service_ids_leave_usages_alone(self, app, staff_client, service_id):
        patient = staff_client.post('/api/patients', json={
            'firstName': 'Jane', 'lastName': 'Doe', 'serviceIds': [service_id],
        }).get_json()['data']

        staff_client.patch(f"/api/patients/{patient['id']}", json={'notes': 'Allergic to latex'})

        assert set(_usages(app, patient['id'])) == {service_id}

    def test_empty_list_clears_usages(self, app, staff_client, service_id):
        patient = staff_client.post('/api/patients', json={
            'firstName': 'Jane', 'lastName': 'Doe', 'serviceIds': [service_id],
        }).get_json()['data']

        staff_client.patch(f"/api/patients/{patient['id']}", json={'serviceIds': []})

        assert _usages(app, patient['id']) == {}

    def test_unknown_service_rolls_back_field_changes(self, app, staff_client, service_id):
        patient = staff_client.post('/api/patients', json={
            'firstName': 'Jane', 'lastName': 'Doe', 'serviceIds': [service_id],
        }).get_json()['data']

        response = staff_client.patch(f"/api/patients/{patient['id']}", json={
            'firstName': 'Janet', 'serviceIds': ['ghost-1', service_id, 'ghost-2'],
        })

        assert response.status_code == 400
        error = response.get_json()['error']
        assert 'ghost-1' in error and 'ghost-2' in error
        reloaded = staff_client.get(f"/api/patients/{patient['id']}").get_json()['data']
        assert reloaded['firstName'] == 'Jane'
        assert set(_usages(app, patient['id'])) == {service_id}


class TestUpdatePatient:

    def test_partial_update(self, staff_client, patient_id):
        response = staff_client.patch(f'/api/patients/{patient_id}', json={'dob': '1990-04-02', 'phone': ''})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['dob'] == '1990-04-02'
        assert data['phone'] is None
        assert data['lastName'] == 'Doe'

    def test_names_cannot_be_cleared(self, staff_client, patient_id):
        response = staff_client.patch(f'/api/patients/{patient_id}', json={'lastName': None})

        assert response.status_code == 400
        assert response.get_json()['details'][0]['field'] == 'lastName'

    def test_update_missing_is_404(self, staff_client):
        assert staff_client.patch('/api/patients/unknown', json={'notes': 'x'}).status_code == 404


class TestDeletePatient:

    def test_appointments_become_guest_bookings(self, app, staff_client, patient_id, service_id):
        appointment = staff_client.post('/api/appointments', json={
            'patientId': patient_id, 'serviceId': service_id, 'date': '2026-03-01T09:30:00Z',
        }).get_json()['data']
        staff_client.patch(f'/api/patients/{patient_id}', json={'serviceIds': [service_id]})

        response = staff_client.delete(f'/api/patients/{patient_id}')

        assert response.status_code == 200
        assert response.get_json() == {'success': True, 'ok': True}
        with app.app_context():
            kept = db.session.get(Appointment, appointment['id'])
            assert kept.patient_id is None
            assert kept.custom_patient_name == 'Jane Doe'
            assert PatientServiceUsage.query.filter_by(patient_id=patient_id).count() == 0

    def test_portal_account_is_removed(self, app, staff_client, patient_id):
        staff_client.post('/api/patient-accounts', json={
            'patientId': patient_id, 'email': 'jane@example.com', 'password': 'secret-pass',
        })

        staff_client.delete(f'/api/patients/{patient_id}')

        with app.app_context():
            assert PatientAccount.query.count() == 0

    def test_delete_missing_is_404(self, staff_client):
        assert staff_client.delete('/api/patients/unknown').status_code == 404


class TestListPatients:

    def test_search(self, staff_client, make_patient):
        make_patient('Jane', 'Doe', email='jane@example.com')
        make_patient('John', 'Smith', phone='5550199')

        names = [p['firstName'] for p in staff_client.get('/api/patients?q=smi').get_json()['data']]
        assert names == ['John']

        by_email = staff_client.get('/api/patients?email=JANE@example.com').get_json()['data']
        assert [p['lastName'] for p in by_email] == ['Doe']

    def test_requires_login(self, client):
        response = client.get('/api/patients')
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Authentication required'
