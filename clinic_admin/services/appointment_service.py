"""
Appointment lifecycle: creation with the patient-or-guest rule, partial
updates, deletion, filtered listing and public website bookings.
"""
import logging

from clinic_admin.extensions import db
from clinic_admin.errors import IntegrityError, ValidationError
from clinic_admin.models import Appointment, Patient, Service, User
from clinic_admin.models.appointment import BOOKED
from clinic_admin.models.base import to_naive_utc
from clinic_admin.utils.persistence import atomic, get_or_404

logger = logging.getLogger(__name__)

PATIENT_REQUIRED_MESSAGE = 'Provide a patient or enter a name.'


def _check_reference(model, record_id, label):
    if record_id and db.session.get(model, record_id) is None:
        raise IntegrityError(f"{label} not found: {record_id}")


def _check_references(service_id=None, patient_id=None, staff_id=None):
    _check_reference(Service, service_id, 'Service')
    _check_reference(Patient, patient_id, 'Patient')
    _check_reference(User, staff_id, 'Staff member')


def list_appointments(filters):
    """Appointments matching ``filters`` (AppointmentFilters), newest first."""
    query = Appointment.query
    if filters.status:
        query = query.filter(Appointment.status == filters.status)
    if filters.patient_id:
        query = query.filter(Appointment.patient_id == filters.patient_id)
    if filters.from_:
        query = query.filter(Appointment.date >= to_naive_utc(filters.from_))
    if filters.to:
        query = query.filter(Appointment.date <= to_naive_utc(filters.to))
    return query.order_by(Appointment.date.desc()).all()


def get_appointment(appointment_id):
    return get_or_404(Appointment, appointment_id, 'Appointment not found')


def create_appointment(data, allow_staff=True):
    """
    Create an appointment from an AppointmentCreate / PublicBooking payload.

    Exactly one of patient / guest name is stored; a patient id wins over a
    guest name when both are given.
    """
    patient_id = data.patient_id
    guest_name = None if patient_id else data.patient_name
    if not patient_id and not guest_name:
        raise ValidationError(PATIENT_REQUIRED_MESSAGE, field='patientId')

    staff_id = getattr(data, 'staff_id', None) if allow_staff else None
    status = getattr(data, 'status', None) if allow_staff else None

    _check_references(service_id=data.service_id, patient_id=patient_id, staff_id=staff_id)

    with atomic():
        appointment = Appointment(
            patient_id=patient_id,
            custom_patient_name=guest_name,
            service_id=data.service_id,
            staff_id=staff_id,
            date=to_naive_utc(data.date),
            status=status or BOOKED,
            notes=data.notes,
        )
        db.session.add(appointment)

    logger.info(
        "Appointment %s created for %s on %s",
        appointment.id, patient_id or 'guest', appointment.date,
    )
    return appointment


def _resolve_patient(appointment, data):
    """Return the (patient_id, guest_name) pair the update leaves behind."""
    patient_id = appointment.patient_id
    guest_name = appointment.custom_patient_name

    if data.provided('patient_id'):
        patient_id = data.patient_id
        if not patient_id and data.provided('patient_name'):
            guest_name = data.patient_name
    elif data.provided('patient_name'):
        guest_name = data.patient_name

    if patient_id:
        return patient_id, None
    if not guest_name:
        raise ValidationError(PATIENT_REQUIRED_MESSAGE, field='patientId')
    return None, guest_name


def update_appointment(appointment_id, data):
    """Apply an AppointmentUpdate; only the fields the client sent change."""
    appointment = get_appointment(appointment_id)

    patient_id, guest_name = _resolve_patient(appointment, data)
    changes = {'patient_id': patient_id, 'custom_patient_name': guest_name}

    if data.provided('service_id'):
        if not data.service_id:
            raise ValidationError('Service is required', field='serviceId')
        changes['service_id'] = data.service_id
    if data.provided('staff_id'):
        changes['staff_id'] = data.staff_id
    if data.provided('date'):
        if data.date is None:
            raise ValidationError('Date is required', field='date')
        changes['date'] = to_naive_utc(data.date)
    if data.provided('status') and data.status:
        changes['status'] = data.status
    if data.provided('notes'):
        changes['notes'] = data.notes

    _check_references(
        service_id=changes.get('service_id'),
        patient_id=patient_id if patient_id != appointment.patient_id else None,
        staff_id=changes.get('staff_id'),
    )

    with atomic():
        for name, value in changes.items():
            setattr(appointment, name, value)

    logger.info("Appointment %s updated (%s)", appointment.id, ', '.join(sorted(data.model_fields_set)))
    return appointment



def delete_appointment(appointment_id):
    appointment = get_appointment(appointment_id)
    with atomic() as session:
        session.delete(appointment)
    logger.info("Appointment %s deleted", appointment_id)
