"""
Back-office users: CRUD with the rule that at least one ADMIN remains.
"""
import logging

from clinic_admin.errors import ConflictError
from clinic_admin.models import Appointment, User
from clinic_admin.models.base import utcnow
from clinic_admin.models.user import ROLE_ADMIN
from clinic_admin.utils.persistence import atomic, get_or_404

logger = logging.getLogger(__name__)

USER_UNIQUE_MESSAGES = {'email': 'Email already in use.'}
LAST_ADMIN_MESSAGE = 'At least one admin must remain.'


def _other_admins(user):
    return User.query.filter(User.role == ROLE_ADMIN, User.id != user.id).count()


def _guard_last_admin(user):
    if user.role == ROLE_ADMIN and _other_admins(user) == 0:
        raise ConflictError(LAST_ADMIN_MESSAGE, field='role')


def list_users():
    return User.query.order_by(User.created_at.desc()).all()


def get_user(user_id):
    return get_or_404(User, user_id, 'User not found')


def authenticate(email, password):
    """Return the user for valid credentials and record the login, else None."""
    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None or not user.check_password(password):
        logger.warning("Failed login attempt for %s", email)
        return None

    with atomic():
        user.last_login = utcnow()
        user.login_count = (user.login_count or 0) + 1
    logger.info("User %s logged in", user.email)
    return user


def create_user(data):
    with atomic(USER_UNIQUE_MESSAGES) as session:
        user = User(email=data.email, name=data.name, role=data.role)
        user.set_password(data.password)
        session.add(user)
    logger.info("User created: %s (%s)", user.email, user.role)
    return user


def update_user(user_id, data):
    user = get_user(user_id)
    if data.role and data.role != ROLE_ADMIN:
        _guard_last_admin(user)

    with atomic(USER_UNIQUE_MESSAGES):
        if data.email:
            user.email = data.email
        if data.provided('name'):
            user.name = data.name
        if data.role:
            user.role = data.role
        if data.password:
            user.set_password(data.password)
    logger.info("User updated: %s", user.id)
    return user


def delete_user(user_id):
    """Delete a user; their appointments become unassigned."""
    user = get_user(user_id)
    _guard_last_admin(user)

    with atomic() as session:
        Appointment.query.filter_by(staff_id=user.id).update(
            {Appointment.staff_id: None}, synchronize_session='fetch'
        )
        session.delete(user)
    logger.info("User deleted: %s", user_id)
