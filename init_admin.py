#!/usr/bin/env python3
"""
Create the first ADMIN user for the back-office.
Run with: ADMIN_EMAIL=... ADMIN_PASSWORD=... python3 init_admin.py
"""
import os
import sys

from clinic_admin import create_app
from clinic_admin.extensions import db
from clinic_admin.models import User
from clinic_admin.models.user import ROLE_ADMIN


def create_admin(email, password, name=None):
    """Create an ADMIN user unless one with this email already exists.
    Returns True when a user was created."""
    email = email.strip().lower()
    existing = User.query.filter_by(email=email).first()
    if existing:
        print(f"  - User '{email}' already exists ({existing.role}), skipping")
        return False

    user = User(email=email, name=name or 'Administrator', role=ROLE_ADMIN)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    print(f"  ✓ Created admin: {email}")
    return True


def main():
    email = os.getenv('ADMIN_EMAIL')
    password = os.getenv('ADMIN_PASSWORD')
    if not email or not password:
        print("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1
    if len(password) < 6:
        print("ADMIN_PASSWORD must be at least 6 characters")
        return 1

    app = create_app()
    with app.app_context():
        print("=" * 60)
        print("Initializing admin user")
        print("=" * 60)
        create_admin(email, password, os.getenv('ADMIN_NAME'))
        print("\n⚠️  IMPORTANT: Change the password after first login!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
