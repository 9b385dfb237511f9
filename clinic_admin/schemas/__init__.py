from .base import Schema, load
from .appointment import AppointmentCreate, AppointmentUpdate, AppointmentFilters, PublicBooking
from .patient import (
    PatientCreate, PatientUpdate, PatientRegistration, PatientAccountCreate, PatientSearch,
)
from .catalog import (
    ServiceCreate, ServiceUpdate, DoctorCreate, DoctorUpdate, BlogCreate, BlogUpdate,
    SpecialtyClinicCreate, SpecialtyClinicUpdate, SiteSettingsUpdate, ContentFilters,
)
from .user import UserCreate, UserUpdate, LoginRequest

__all__ = [
    "Schema", "load",
    "AppointmentCreate", "AppointmentUpdate", "AppointmentFilters", "PublicBooking",
    "PatientCreate", "PatientUpdate", "PatientRegistration", "PatientAccountCreate", "PatientSearch",
    "ServiceCreate", "ServiceUpdate", "DoctorCreate", "DoctorUpdate", "BlogCreate", "BlogUpdate",
    "SpecialtyClinicCreate", "SpecialtyClinicUpdate", "SiteSettingsUpdate", "ContentFilters",
    "UserCreate", "UserUpdate", "LoginRequest",
]
