"""Initial schema: users, patients, catalog, appointments, portal accounts, audit log

Revision ID: 3c9e5f1a2b7d
Revises:
Create Date: 2026-10-16 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9e5f1a2b7d'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    """Create every table used by the models."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('role', sa.String(length=10), nullable=False, server_default='STAFF'),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('login_count', sa.Integer(), nullable=True, server_default='0'),
        *_timestamps(),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_role'), ['role'], unique=False)

    op.create_table(
        'patients',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True, unique=True),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(length=200), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column(
            'parent_id', sa.String(length=32),
            sa.ForeignKey('services.id', ondelete='SET NULL'), nullable=True,
        ),
        *_timestamps(),
    )
    with op.batch_alter_table('services', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_services_priority'), ['priority'], unique=False)
        batch_op.create_index(batch_op.f('ix_services_parent_id'), ['parent_id'], unique=False)

    op.create_table(
        'patient_service_usages',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column(
            'patient_id', sa.String(length=32),
            sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'service_id', sa.String(length=32),
            sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('used_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('patient_id', 'service_id', name='uq_patient_service_usage'),
    )
    with op.batch_alter_table('patient_service_usages', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_patient_service_usages_patient_id'), ['patient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_patient_service_usages_service_id'), ['service_id'], unique=False)

    op.create_table(
        'patient_accounts',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column(
            'patient_id', sa.String(length=32),
            sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False, unique=True,
        ),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table('patient_accounts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_patient_accounts_email'), ['email'], unique=True)

    op.create_table(
        'appointments',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('patient_id', sa.String(length=32), sa.ForeignKey('patients.id'), nullable=True),
        sa.Column('custom_patient_name', sa.String(length=200), nullable=True),
        sa.Column('service_id', sa.String(length=32), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('staff_id', sa.String(length=32), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='BOOKED'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    with op.batch_alter_table('appointments', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_appointments_patient_id'), ['patient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_appointments_service_id'), ['service_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_appointments_staff_id'), ['staff_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_appointments_date'), ['date'], unique=False)
        batch_op.create_index(batch_op.f('ix_appointments_status'), ['status'], unique=False)

    op.create_table(
        'doctors',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=True),
        sa.Column('specialty', sa.String(length=200), nullable=True),
        sa.Column('short_bio', sa.String(length=240), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('phone', sa.String(length=30), nullable=True, unique=True),
        sa.Column('years_experience', sa.Integer(), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=True),
        sa.Column('languages', sa.JSON(), nullable=False),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('gallery', sa.JSON(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    with op.batch_alter_table('doctors', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_doctors_priority'), ['priority'], unique=False)

    op.create_table(
        'blogs',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        *_timestamps(),
    )
    with op.batch_alter_table('blogs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_blogs_slug'), ['slug'], unique=True)

    op.create_table(
        'specialty_clinics',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'site_settings',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('home_hero_announcement', sa.String(length=200), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('entity_type', sa.String(length=64), nullable=False),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('action', sa.String(length=32), nullable=False),
        sa.Column(
            'user_id', sa.String(length=32),
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    with op.batch_alter_table('audit_logs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_audit_logs_entity_type'), ['entity_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_audit_logs_entity_id'), ['entity_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_audit_logs_action'), ['action'], unique=False)
        batch_op.create_index(batch_op.f('ix_audit_logs_user_id'), ['user_id'], unique=False)


def downgrade():
    op.drop_table('audit_logs')
    op.drop_table('site_settings')
    op.drop_table('specialty_clinics')
    op.drop_table('blogs')
    op.drop_table('doctors')
    op.drop_table('appointments')
    op.drop_table('patient_accounts')
    op.drop_table('patient_service_usages')
    op.drop_table('services')
    op.drop_table('patients')
    op.drop_table('users')
