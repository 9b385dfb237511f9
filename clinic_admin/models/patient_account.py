from clinic_admin.extensions import db, bcrypt
from .base import TimestampMixin, generate_id, isoformat


class PatientAccount(db.Model, TimestampMixin):
    """Patient portal login, one per patient."""
    __tablename__ = 'patient_accounts'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    patient_id = db.Column(
        db.String(32),
        db.ForeignKey('patients.id', ondelete='CASCADE'),
        unique=True,
        nullable=False,
    )
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    patient = db.relationship('Patient', back_populates='account')

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self, include_patient=True):
        data = {
            'id': self.id,
            'patientId': self.patient_id,
            'email': self.email,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_patient and self.patient is not None:
            patient = self.patient
            data['patient'] = {
                'id': patient.id,
                'firstName': patient.first_name,
                'lastName': patient.last_name,
                'email': patient.email,
                'phone': patient.phone,
            }
        return data

    def __repr__(self):
        return f"<PatientAccount {self.email}>"
