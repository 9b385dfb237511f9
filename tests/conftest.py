"""
Global test fixtures for pytest.

Provides:
- A fresh app on TestingConfig (in-memory SQLite) per test
- Anonymous, ADMIN and STAFF test clients with their own session cookies
- Small factories that insert rows and return their ids
"""
from unittest.mock import MagicMock, patch

import pytest

from clinic_admin import create_app
from clinic_admin.extensions import db
from clinic_admin.models import Patient, Service, User
from clinic_admin.models.user import ROLE_ADMIN, ROLE_STAFF

ADMIN_EMAIL = 'admin@test.com'
STAFF_EMAIL = 'staff@test.com'
PASSWORD = 'testpass123'


# ============================================================================
# Application
# ============================================================================

@pytest.fixture
def app(tmp_path):
    """App with an empty schema; uploads go to a per-test directory."""
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def minio_client(app):
    """Switch the app to the MinIO backend with a mocked client."""
    app.config.update(
        STORAGE_BACKEND='minio',
        MINIO_BUCKET='clinic-uploads',
        MINIO_PUBLIC_URL='http://cdn.example/clinic',
    )
    with patch('clinic_admin.services.storage.Minio') as minio_cls:
        client = MagicMock()
        client.bucket_exists.return_value = True
        minio_cls.return_value = client
        yield client


def _create_user(app, email, role, password=PASSWORD, name=None):
    with app.app_context():
        user = User(email=email, name=name or email.split('@')[0], role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def _login(client, email, password=PASSWORD):
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return client


# ============================================================================
# Clients
# ============================================================================

@pytest.fixture
def client(app):
    """Unauthenticated test client."""
    return app.test_client()


@pytest.fixture
def admin_user(app):
    return _create_user(app, ADMIN_EMAIL, ROLE_ADMIN, name='Admin')


@pytest.fixture
def staff_user(app):
    return _create_user(app, STAFF_EMAIL, ROLE_STAFF, name='Staff')


@pytest.fixture
def admin_client(app, admin_user):
    """Signed-in client with the ADMIN role."""
    return _login(app.test_client(), ADMIN_EMAIL)


@pytest.fixture
def staff_client(app, staff_user):
    """Signed-in client with the STAFF role."""
    return _login(app.test_client(), STAFF_EMAIL)


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_service(app):
    """Insert a service and return its id."""
    def factory(name='Consultation', parent_id=None, **fields):
        with app.app_context():
            service = Service(
                name=name,
                description=fields.pop('description', f'{name} description'),
                images=fields.pop('images', ['/uploads/services/default.png']),
                parent_id=parent_id,
                **fields,
            )
            db.session.add(service)
            db.session.commit()
            return service.id
    return factory


@pytest.fixture
def make_patient(app):
    """Insert a patient and return its id."""
    def factory(first_name='Jane', last_name='Doe', **fields):
        with app.app_context():
            patient = Patient(first_name=first_name, last_name=last_name, **fields)
            db.session.add(patient)
            db.session.commit()
            return patient.id
    return factory


@pytest.fixture
def service_id(make_service):
    return make_service()


@pytest.fixture
def patient_id(make_patient):
    return make_patient()
