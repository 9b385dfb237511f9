from clinic_admin.extensions import db
from .base import TimestampMixin, generate_id, isoformat

BOOKED = 'BOOKED'
COMPLETED = 'COMPLETED'
CANCELLED = 'CANCELLED'
NO_SHOW = 'NO_SHOW'

APPOINTMENT_STATUSES = (BOOKED, COMPLETED, CANCELLED, NO_SHOW)


class Appointment(db.Model, TimestampMixin):
    __tablename__ = 'appointments'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)

    # Either a registered patient or a free-text guest name, never both
    patient_id = db.Column(db.String(32), db.ForeignKey('patients.id'), nullable=True, index=True)
    custom_patient_name = db.Column(db.String(200), nullable=True)

    service_id = db.Column(db.String(32), db.ForeignKey('services.id'), nullable=False, index=True)
    staff_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=True, index=True)

    date = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(db.String(20), default=BOOKED, nullable=False, index=True)
    notes = db.Column(db.Text)

    patient = db.relationship('Patient', back_populates='appointments')
    service = db.relationship('Service')
    staff = db.relationship('User')

    @property
    def display_name(self):
        if self.patient is not None:
            return self.patient.full_name
        return self.custom_patient_name

    def to_dict(self):
        return {
            'id': self.id,
            'patientId': self.patient_id,
            'customPatientName': self.custom_patient_name,
            'patientName': self.display_name,
            'serviceId': self.service_id,
            'staffId': self.staff_id,
            'date': isoformat(self.date),
            'status': self.status,
            'notes': self.notes,
            'patient': self.patient.summary() if self.patient else None,
            'service': {'id': self.service.id, 'name': self.service.name} if self.service else None,
            'staff': {'id': self.staff.id, 'name': self.staff.name} if self.staff else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Appointment {self.display_name} - {self.service_id} on {self.date} [{self.status}]>"
