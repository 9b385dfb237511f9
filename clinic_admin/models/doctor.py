from clinic_admin.extensions import db
from .base import TimestampMixin, generate_id, isoformat


class Doctor(db.Model, TimestampMixin):
    """Public-facing doctor profile (not a login account)."""
    __tablename__ = 'doctors'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    full_name = db.Column(db.String(200), nullable=False)
    title = db.Column(db.String(100))
    specialty = db.Column(db.String(200))
    short_bio = db.Column(db.String(240))
    bio = db.Column(db.Text)
    email = db.Column(db.String(255), unique=True, nullable=True)
    phone = db.Column(db.String(30), unique=True, nullable=True)
    years_experience = db.Column(db.Integer)
    priority = db.Column(db.Integer, index=True)
    languages = db.Column(db.JSON, default=list, nullable=False)
    photo_url = db.Column(db.String(1024))
    gallery = db.Column(db.JSON, default=list, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    featured = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'title': self.title,
            'specialty': self.specialty,
            'shortBio': self.short_bio,
            'bio': self.bio,
            'email': self.email,
            'phone': self.phone,
            'yearsExperience': self.years_experience,
            'priority': self.priority,
            'languages': list(self.languages or []),
            'photoUrl': self.photo_url,
            'gallery': list(self.gallery or []),
            'active': self.active,
            'featured': self.featured,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Doctor {self.full_name}>"
