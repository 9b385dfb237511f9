"""
Audit logging: create, update and delete of patients, appointments and users.
"""
import logging
from typing import Optional

from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from clinic_admin.extensions import db
from clinic_admin.models import AuditLog

logger = logging.getLogger(__name__)


def _acting_user_id() -> Optional[str]:
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def log_audit(
    entity_type: str,
    action: str,
    user_id: Optional[str] = None,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """Append an audit log entry. Runs after the audited change has committed."""
    entity_id = str(entity_id) if entity_id is not None else None
    try:
        if user_id is None:
            user_id = _acting_user_id()
        # A user who just deleted their own account no longer exists to reference
        if entity_type == 'user' and action == 'delete' and user_id == entity_id:
            user_id = None
        entry = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            user_id=user_id,
            details=details or None,
        )
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        logger.warning("Audit log failed: %s", e)
        db.session.rollback()
