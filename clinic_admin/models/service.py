from clinic_admin.extensions import db
from .base import TimestampMixin, generate_id, isoformat


class Service(db.Model, TimestampMixin):
    """Catalog entry; at most two levels deep via parent_id."""
    __tablename__ = 'services'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    short_description = db.Column(db.String(200))
    priority = db.Column(db.Integer, index=True)  # lower sorts first
    duration_minutes = db.Column(db.Integer)
    active = db.Column(db.Boolean, default=True, nullable=False)
    images = db.Column(db.JSON, default=list, nullable=False)
    parent_id = db.Column(
        db.String(32), db.ForeignKey('services.id', ondelete='SET NULL'), nullable=True, index=True
    )

    parent = db.relationship('Service', remote_side=[id], back_populates='sub_services')
    sub_services = db.relationship(
        'Service', back_populates='parent', order_by='Service.name.asc()'
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'shortDescription': self.short_description,
            'priority': self.priority,
            'durationMinutes': self.duration_minutes,
            'active': self.active,
            'images': list(self.images or []),
            'parentId': self.parent_id,
            'parent': {'id': self.parent.id, 'name': self.parent.name} if self.parent else None,
            'subServices': [
                {
                    'id': child.id,
                    'name': child.name,
                    'active': child.active,
                    'images': list(child.images or []),
                    'shortDescription': child.short_description,
                }
                for child in self.sub_services
            ],
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Service {self.name} ({self.id})>"
