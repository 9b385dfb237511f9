"""
Transaction boundary shared by routes and services.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError as DBIntegrityError

from clinic_admin.extensions import db
from clinic_admin.errors import NotFoundError, translate_integrity_error

logger = logging.getLogger(__name__)


@contextmanager
def atomic(unique_messages=None):
    """
    Run a block as one unit of work.

    Commits when the block finishes, rolls back on any exception. Database
    integrity failures are re-raised as ConflictError/IntegrityError using
    ``unique_messages`` to name the colliding field.
    """
    try:
        yield db.session
        db.session.commit()
    except DBIntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error, transaction rolled back: %s", exc.orig)
        raise translate_integrity_error(exc, unique_messages) from exc
    except Exception:
        db.session.rollback()
        raise


def get_or_404(model, record_id, message='Not found'):
    record = db.session.get(model, record_id) if record_id else None
    if record is None:
        raise NotFoundError(message)
    return record
