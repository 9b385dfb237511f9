from .health import health_bp
from .auth import auth_bp
from .pages import pages_bp
from .patient import patient_bp
from .appointment import appointment_bp
from .public import public_bp
from .patient_account import patient_account_bp, patient_auth_bp
from .service import service_bp
from .doctor import doctor_bp
from .blog import blog_bp
from .specialty_clinic import specialty_clinic_bp
from .site_settings import site_settings_bp
from .user import user_bp
from .upload import upload_bp

__all__ = [
    'health_bp', 'auth_bp', 'pages_bp', 'patient_bp', 'appointment_bp', 'public_bp',
    'patient_account_bp', 'patient_auth_bp', 'service_bp', 'doctor_bp', 'blog_bp',
    'specialty_clinic_bp', 'site_settings_bp', 'user_bp', 'upload_bp',
]
