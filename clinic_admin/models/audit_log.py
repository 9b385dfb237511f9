"""
Audit log for create, update and delete of patient-facing records.
"""
from clinic_admin.extensions import db
from .base import utcnow, isoformat


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    entity_type = db.Column(db.String(64), nullable=False, index=True)  # patient, appointment, user
    entity_id = db.Column(db.String(64), nullable=True, index=True)
    action = db.Column(db.String(32), nullable=False, index=True)  # create, update, delete
    user_id = db.Column(db.String(32), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    details = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "entityType": self.entity_type,
            "entityId": self.entity_id,
            "action": self.action,
            "userId": self.user_id,
            "details": self.details,
            "createdAt": isoformat(self.created_at),
        }
