from clinic_admin.extensions import db, bcrypt
from .base import TimestampMixin, generate_id, isoformat
from flask_login import UserMixin

ROLE_ADMIN = 'ADMIN'
ROLE_STAFF = 'STAFF'
USER_ROLES = (ROLE_ADMIN, ROLE_STAFF)


class User(db.Model, TimestampMixin, UserMixin):
    """Back-office account (admin or staff)."""
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200))
    role = db.Column(db.String(10), default=ROLE_STAFF, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Last login tracking
    last_login = db.Column(db.DateTime, nullable=True)
    login_count = db.Column(db.Integer, default=0)

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    def has_role(self, *role_names):
        return self.role in role_names

    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'lastLogin': isoformat(self.last_login),
            'loginCount': self.login_count or 0,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<User {self.email} - {self.role}>"
