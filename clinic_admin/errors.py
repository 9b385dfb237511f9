"""
Domain errors and their HTTP translation.

Services and routes raise these; the handlers registered by
``register_error_handlers`` turn them into the JSON envelope used by every
endpoint.
"""
import logging
import re

from flask import jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

logger = logging.getLogger(__name__)

GENERIC_DUPLICATE_MESSAGE = 'Duplicate value detected.'

# Default unique-field messages; routes pass entity-specific tables on top.
UNIQUE_FIELD_MESSAGES = {
    'email': 'Email already in use.',
    'phone': 'Phone number already in use.',
}

_SQLITE_UNIQUE = re.compile(r'UNIQUE constraint failed: (.+)')
_POSTGRES_KEY = re.compile(r'Key \((.+?)\)=')


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""
    status_code = 400
    default_message = 'Request failed.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = 'Validation failed.'

    def __init__(self, message=None, details=None, field=None):
        self.details = list(details or [])
        if field:
            # Field-level problems share the generic headline
            self.details.append({'field': field, 'message': message or self.default_message})
            message = None
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc):
        """Flatten a pydantic ValidationError into per-field details."""
        details = []
        for err in exc.errors():
            field = '.'.join(str(part) for part in err.get('loc', ())) or None
            message = err.get('msg', 'Invalid value')
            ctx_error = (err.get('ctx') or {}).get('error')
            if err.get('type') == 'value_error' and ctx_error is not None:
                message = str(ctx_error)
            details.append({'field': field, 'message': message})
        return cls(details=details)

    def to_dict(self):
        payload = super().to_dict()
        payload['details'] = self.details
        return payload


class ConflictError(AppError):
    status_code = 409
    default_message = GENERIC_DUPLICATE_MESSAGE

    def __init__(self, message=None, field=None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        payload = super().to_dict()
        payload['field'] = self.field
        return payload


class NotFoundError(AppError):
    status_code = 404
    default_message = 'Not found'


class IntegrityError(AppError):
    """A cross-entity reference is invalid (unknown id, row still referenced)."""
    status_code = 400
    default_message = 'Referenced record does not exist.'


class PayloadTooLargeError(AppError):
    status_code = 413
    default_message = 'File too large.'


class UpstreamStorageError(AppError):
    status_code = 503
    default_message = 'File storage is currently unavailable.'


def unique_violation_fields(exc):
    """
    Return the column names named by a unique-constraint violation, or None
    when the database error is not a uniqueness failure.
    """
    orig = getattr(exc, 'orig', exc)
    text = str(orig)

    match = _SQLITE_UNIQUE.search(text)
    if match:
        columns = [part.strip() for part in match.group(1).split(',')]
        return [column.split('.')[-1] for column in columns]

    pgcode = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if pgcode == '23505':
        match = _POSTGRES_KEY.search(text)
        if match:
            return [part.strip().strip('"') for part in match.group(1).split(',')]
        return []
    return None


def translate_integrity_error(exc, messages=None):
    """Map a SQLAlchemy IntegrityError to ConflictError or IntegrityError."""
    fields = unique_violation_fields(exc)
    if fields is None:
        return IntegrityError()

    table = dict(UNIQUE_FIELD_MESSAGES)
    table.update(messages or {})
    for field in fields:
        message = table.get(field)
        if message:
            return ConflictError(message, field=field)
    return ConflictError(GENERIC_DUPLICATE_MESSAGE, field=fields[0] if fields else None)


def register_error_handlers(app):
    """Install the JSON error handlers on the Flask app."""

    @app.errorhandler(AppError)
    def handle_app_error(error):
        logger.warning(
            "%s %s -> %s: %s", request.method, request.path, error.status_code, error.message
        )
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        logger.warning("%s %s -> 413: request body too large", request.method, request.path)
        return jsonify({'success': False, 'error': PayloadTooLargeError.default_message}), 413

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'success': False, 'error': 'Endpoint not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(Exception)
    def handle_exception(error):
        if isinstance(error, HTTPException):
            return jsonify({'success': False, 'error': error.description}), error.code
        logger.error(
            "Unhandled exception on %s %s: %s", request.method, request.path, error, exc_info=True
        )
        return jsonify({
            'success': False,
            'error': 'Internal server error. Check server logs for details.'
        }), 500
