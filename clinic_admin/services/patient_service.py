"""
Patients and their service usage history.

The usage reconciler keeps ``PatientServiceUsage`` rows in step with the
``serviceIds`` list a client submits: rows that disappear are deleted, new
ids get a row, rows that stay are left alone so their ``usedAt`` survives.
"""
import logging
import re

from sqlalchemy import or_

from clinic_admin.extensions import db
from clinic_admin.errors import ConflictError, IntegrityError, ValidationError
from clinic_admin.models import Patient, PatientAccount, PatientServiceUsage, Service
from clinic_admin.utils.persistence import atomic, get_or_404

logger = logging.getLogger(__name__)

PATIENT_UNIQUE_MESSAGES = {
    'email': 'Email already in use.',
    'phone': 'Phone number already in use.',
}

ACCOUNT_UNIQUE_MESSAGES = {
    'email': 'Email already in use.',
    'patient_id': 'Account already exists for this patient.',
}

# Portal registration reports every account collision as an email clash
REGISTRATION_UNIQUE_MESSAGES = {
    'email': 'Email already in use.',
    'patient_id': 'Email already in use.',
    'phone': 'Phone number already in use.',
}

PATIENT_FIELDS = ('first_name', 'last_name', 'phone', 'email', 'dob', 'notes')


def _collapse_whitespace(value):
    return re.sub(r'\s+', ' ', value.strip())


def reconcile_service_usages(patient, service_ids):
    """
    Make the patient's usage rows match ``service_ids`` exactly.

    Must run inside the caller's transaction; unknown service ids raise
    IntegrityError before anything is changed.
    """
    wanted = list(dict.fromkeys(service_ids))
    if wanted:
        found = {
            service_id
            for (service_id,) in db.session.query(Service.id).filter(Service.id.in_(wanted))
        }
        missing = [service_id for service_id in wanted if service_id not in found]
        if missing:
            raise IntegrityError(f"Unknown service ids: {', '.join(missing)}")

    current = {usage.service_id: usage for usage in patient.service_usages}
    for service_id, usage in current.items():
        if service_id not in wanted:
            patient.service_usages.remove(usage)
    added = [service_id for service_id in wanted if service_id not in current]
    for service_id in added:
        patient.service_usages.append(PatientServiceUsage(service_id=service_id))

    removed = [service_id for service_id in current if service_id not in wanted]
    if added or removed:
        logger.info(
            "Patient %s service usages: +%s -%s", patient.id or 'new', len(added), len(removed)
        )


def list_patients(search=None):
    query = Patient.query
    if search is not None and search.email:
        query = query.filter(db.func.lower(Patient.email) == search.email.lower())
    if search is not None and search.q:
        term = f"%{search.q}%"
        query = query.filter(or_(
            Patient.first_name.ilike(term),
            Patient.last_name.ilike(term),
            Patient.phone.ilike(term),
            Patient.email.ilike(term),
        ))
    return query.order_by(Patient.created_at.desc()).all()


def get_patient(patient_id):
    return get_or_404(Patient, patient_id, 'Patient not found')


def create_patient(data):
    """Create a patient and one usage row per distinct service id."""
    with atomic(PATIENT_UNIQUE_MESSAGES) as session:
        patient = Patient(**{name: getattr(data, name) for name in PATIENT_FIELDS})
        session.add(patient)
        reconcile_service_usages(patient, data.service_ids)

    logger.info("Patient created: %s (%s)", patient.full_name, patient.id)
    return patient


def update_patient(patient_id, data):
    """
    Partial update. ``serviceIds`` omitted leaves usages untouched; when sent
    the usages are reconciled in the same transaction as the field changes.
    """
    patient = get_patient(patient_id)
    changes = data.changes('service_ids')
    for name, field, label in (('first_name', 'firstName', 'First name'), ('last_name', 'lastName', 'Last name')):
        if name in changes and changes[name] is None:
            raise ValidationError(f"{label} is required", field=field)

    with atomic(PATIENT_UNIQUE_MESSAGES):
        for name, value in changes.items():
            setattr(patient, name, value)
        if data.service_ids is not None:
            reconcile_service_usages(patient, data.service_ids)

    logger.info("Patient updated: %s", patient.id)
    return patient


def delete_patient(patient_id):
    """
    Delete a patient with its usages and portal account. Appointments are
    kept as guest appointments under the patient's name.
    """
    patient = get_patient(patient_id)
    full_name = patient.full_name

    with atomic() as session:
        converted = 0
        for appointment in patient.appointments:
            appointment.patient_id = None
            appointment.custom_patient_name = full_name
            converted += 1
        session.flush()
        session.delete(patient)

    logger.info("Patient %s deleted, %d appointment(s) kept as guest bookings", patient_id, converted)
    return converted


# Portal accounts

def find_account(email):
    return PatientAccount.query.filter_by(email=email.lower()).first()


def create_account(data):
    """Create a portal account for an existing patient."""
    patient = get_patient(data.patient_id)
    with atomic(ACCOUNT_UNIQUE_MESSAGES) as session:
        account = PatientAccount(patient_id=patient.id, email=data.email)
        account.set_password(data.password)
        session.add(account)

    logger.info("Portal account created for patient %s", patient.id)
    return account


def register_patient(data):
    """
    Self-registration: match a patient by email or phone (or create one),
    bring its details up to date and attach a new portal account, all in
    one transaction.
    """
    email = data.email
    if find_account(email) is not None:
        raise ConflictError('Email already in use.', field='email')

    first_name = _collapse_whitespace(data.first_name)
    last_name = _collapse_whitespace(data.last_name)

    with atomic(REGISTRATION_UNIQUE_MESSAGES) as session:
        matches = [Patient.email == email]
        if data.phone:
            matches.append(Patient.phone == data.phone)
        patient = Patient.query.filter(or_(*matches)).first()

        if patient is None:
            patient = Patient(first_name=first_name, last_name=last_name, email=email, phone=data.phone)
            session.add(patient)
        else:
            updates = {'first_name': first_name, 'last_name': last_name, 'email': email}
            if data.phone:
                updates['phone'] = data.phone
            for name, value in updates.items():
                if getattr(patient, name) != value:
                    setattr(patient, name, value)

        account = PatientAccount(patient=patient, email=email)
        account.set_password(data.password)
        session.add(account)

    logger.info("Patient %s registered a portal account", patient.id)
    return account
