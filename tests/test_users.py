"""
Tests for back-office users.

Business rules:
- Email unique (409 "Email already in use.")
- Only ADMINs create, update or delete users
- The last ADMIN cannot be demoted or deleted
"""
from clinic_admin.extensions import db
from clinic_admin.models import Appointment, AuditLog, User


class TestCreateUser:

    def test_admin_creates_staff(self, app, admin_client):
        response = admin_client.post('/api/users', json={
            'email': 'New.Person@Example.com', 'name': 'New Person', 'password': 'secret1',
        })

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['email'] == 'new.person@example.com'
        assert data['role'] == 'STAFF'
        assert 'passwordHash' not in data and 'password_hash' not in data
        with app.app_context():
            assert AuditLog.query.filter_by(entity_type='user', action='create').count() == 1

    def test_duplicate_email_is_conflict(self, admin_client, staff_user):
        response = admin_client.post('/api/users', json={
            'email': 'staff@test.com', 'password': 'secret1',
        })

        assert response.status_code == 409
        assert response.get_json() == {
            'success': False, 'error': 'Email already in use.', 'field': 'email',
        }

    def test_short_password(self, admin_client):
        response = admin_client.post('/api/users', json={'email': 'a@b.com', 'password': '123'})
        assert response.status_code == 400

    def test_staff_cannot_create(self, staff_client):
        response = staff_client.post('/api/users', json={'email': 'x@y.com', 'password': 'secret1'})
        assert response.status_code == 403


class TestLastAdmin:

    def test_cannot_demote_last_admin(self, admin_client, admin_user):
        response = admin_client.patch(f'/api/users/{admin_user}', json={'role': 'STAFF'})

        assert response.status_code == 409
        assert response.get_json()['error'] == 'At least one admin must remain.'

    def test_cannot_delete_last_admin(self, admin_client, admin_user):
        response = admin_client.delete(f'/api/users/{admin_user}')
        assert response.status_code == 409

    def test_demote_when_another_admin_exists(self, admin_client, admin_user):
        other = admin_client.post('/api/users', json={
            'email': 'second@test.com', 'password': 'secret1', 'role': 'ADMIN',
        }).get_json()['data']

        response = admin_client.patch(f"/api/users/{other['id']}", json={'role': 'STAFF'})

        assert response.status_code == 200
        assert response.get_json()['data']['role'] == 'STAFF'


class TestUpdateAndDelete:

    def test_password_change(self, client, admin_client, staff_user):
        admin_client.patch(f'/api/users/{staff_user}', json={'password': 'changed-pw'})

        response = client.post('/api/auth/login', json={'email': 'staff@test.com', 'password': 'changed-pw'})
        assert response.status_code == 200

    def test_delete_unassigns_appointments(self, app, admin_client, staff_user, service_id):
        appointment = admin_client.post('/api/appointments', json={
            'patientName': 'Guest', 'serviceId': service_id, 'staffId': staff_user,
            'date': '2026-03-01T09:30:00Z',
        }).get_json()['data']

        response = admin_client.delete(f'/api/users/{staff_user}')

        assert response.status_code == 200
        with app.app_context():
            assert db.session.get(User, staff_user) is None
            assert db.session.get(Appointment, appointment['id']).staff_id is None

    def test_delete_missing_is_404(self, admin_client):
        assert admin_client.delete('/api/users/unknown').status_code == 404

    def test_staff_can_read(self, staff_client, staff_user):
        response = staff_client.get('/api/users')
        assert response.status_code == 200
        assert [u['id'] for u in response.get_json()['data']] == [staff_user]

    def test_admin_deleting_own_account_is_audited(self, app, admin_client, admin_user):
        admin_client.post('/api/users', json={
            'email': 'second@test.com', 'password': 'secret1', 'role': 'ADMIN',
        })

        response = admin_client.delete(f'/api/users/{admin_user}')

        assert response.status_code == 200
        with app.app_context():
            entry = AuditLog.query.filter_by(entity_type='user', action='delete').one()
            assert entry.entity_id == admin_user
            assert entry.user_id is None
