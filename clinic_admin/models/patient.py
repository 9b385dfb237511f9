from clinic_admin.extensions import db
from .base import TimestampMixin, generate_id, isoformat


class Patient(db.Model, TimestampMixin):
    __tablename__ = 'patients'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(30), unique=True, nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    dob = db.Column(db.Date)
    notes = db.Column(db.Text)

    # Relationships
    service_usages = db.relationship(
        'PatientServiceUsage',
        back_populates='patient',
        cascade='all, delete-orphan',
        order_by='PatientServiceUsage.used_at.desc()',
    )
    account = db.relationship(
        'PatientAccount',
        back_populates='patient',
        uselist=False,
        cascade='all, delete-orphan',
    )
    appointments = db.relationship('Appointment', back_populates='patient', lazy='dynamic')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def summary(self):
        return {'id': self.id, 'firstName': self.first_name, 'lastName': self.last_name}

    def to_dict(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'phone': self.phone,
            'email': self.email,
            'dob': isoformat(self.dob),
            'notes': self.notes,
            'serviceUsages': [usage.to_dict() for usage in self.service_usages],
            'hasAccount': self.account is not None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Patient {self.first_name} {self.last_name} ({self.id})>"
