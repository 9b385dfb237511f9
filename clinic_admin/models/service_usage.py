from clinic_admin.extensions import db
from .base import generate_id, utcnow, isoformat


class PatientServiceUsage(db.Model):
    """Which catalog services a patient has used."""
    __tablename__ = 'patient_service_usages'
    __table_args__ = (
        db.UniqueConstraint('patient_id', 'service_id', name='uq_patient_service_usage'),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    patient_id = db.Column(
        db.String(32), db.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False, index=True
    )
    service_id = db.Column(
        db.String(32), db.ForeignKey('services.id', ondelete='CASCADE'), nullable=False, index=True
    )
    used_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    patient = db.relationship('Patient', back_populates='service_usages')
    service = db.relationship('Service')

    def to_dict(self):
        return {
            'id': self.id,
            'patientId': self.patient_id,
            'serviceId': self.service_id,
            'usedAt': isoformat(self.used_at),
            'service': {'id': self.service.id, 'name': self.service.name} if self.service else None,
        }

    def __repr__(self):
        return f"<PatientServiceUsage {self.patient_id} -> {self.service_id}>"
