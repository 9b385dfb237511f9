from .user import User
from .patient import Patient
from .service import Service
from .service_usage import PatientServiceUsage
from .patient_account import PatientAccount
from .appointment import Appointment
from .doctor import Doctor
from .content import Blog, SpecialtyClinic, SiteSettings
from .audit_log import AuditLog

__all__ = [
    "User", "Patient", "Service", "PatientServiceUsage", "PatientAccount", "Appointment",
    "Doctor", "Blog", "SpecialtyClinic", "SiteSettings", "AuditLog",
]
