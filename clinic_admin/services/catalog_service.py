"""
Website catalog content: services (two-level hierarchy), doctors, blog posts,
specialty clinics and the site settings singleton.
"""
import logging

from slugify import slugify
from sqlalchemy import or_

from clinic_admin.extensions import db
from clinic_admin.errors import IntegrityError, ValidationError
from clinic_admin.models import (
    Appointment, Blog, Doctor, PatientServiceUsage, Service, SiteSettings, SpecialtyClinic,
)
from clinic_admin.models.content import SITE_SETTINGS_ID
from clinic_admin.utils.persistence import atomic, get_or_404
from .storage import discard_file

logger = logging.getLogger(__name__)

DOCTOR_UNIQUE_MESSAGES = {
    'email': 'Email already in use.',
    'phone': 'Phone number already in use.',
}
BLOG_UNIQUE_MESSAGES = {'slug': 'Slug already in use.'}


def _by_priority(model):
    """Priority ascending with unset priorities last, then newest first."""
    return (model.priority.is_(None), model.priority.asc(), model.created_at.desc())


def _apply(record, changes):
    for name, value in changes.items():
        setattr(record, name, value)


def _require(changes, *fields):
    """Required columns may be omitted from a partial update but not nulled."""
    for name, field in fields:
        if name in changes and changes[name] is None:
            raise ValidationError(f"{field} is required", field=field)


# Services

def list_services(filters):
    query = Service.query
    if filters.q:
        term = f"%{filters.q}%"
        query = query.filter(or_(
            Service.name.ilike(term),
            Service.description.ilike(term),
            Service.short_description.ilike(term),
        ))
    if filters.active is not None:
        query = query.filter(Service.active == filters.active)
    return query.order_by(*_by_priority(Service)).all()


def get_service(service_id):
    return get_or_404(Service, service_id, 'Service not found')


def _check_parent(service, parent_id):
    """Enforce the two-level hierarchy for ``service`` getting ``parent_id``."""
    if not parent_id:
        return
    if service is not None and parent_id == service.id:
        raise ValidationError('A service cannot be its own parent', field='parentId')
    parent = db.session.get(Service, parent_id)
    if parent is None:
        raise IntegrityError('Parent service not found.')
    if parent.parent_id:
        raise ValidationError('A sub-service cannot have its own sub-services', field='parentId')
    if service is not None and service.sub_services:
        raise ValidationError('A service with sub-services cannot be nested', field='parentId')


def create_service(data):
    _check_parent(None, data.parent_id)
    with atomic() as session:
        service = Service(**data.model_dump())
        session.add(service)
    logger.info("Service created: %s (%s)", service.name, service.id)
    return service


def update_service(service_id, data):
    service = get_service(service_id)
    changes = data.changes()
    _require(changes, ('name', 'name'), ('description', 'description'), ('images', 'images'))
    if 'active' in changes and changes['active'] is None:
        del changes['active']
    if 'parent_id' in changes:
        _check_parent(service, changes['parent_id'])

    with atomic():
        _apply(service, changes)
    logger.info("Service updated: %s", service.id)
    return service


def delete_service(service_id):
    """
    Delete a service. Children are detached and usage rows removed; refused
    while appointments still point at it.
    """
    service = get_service(service_id)
    booked = Appointment.query.filter_by(service_id=service.id).count()
    if booked:
        raise IntegrityError(
            f"Service is referenced by {booked} appointment(s) and cannot be deleted."
        )

    with atomic() as session:
        for child in list(service.sub_services):
            child.parent_id = None
        PatientServiceUsage.query.filter_by(service_id=service.id).delete(synchronize_session='fetch')
        session.delete(service)
    logger.info("Service deleted: %s", service_id)


# Doctors

def list_doctors(filters):
    query = Doctor.query
    if filters.q:
        term = f"%{filters.q}%"
        query = query.filter(or_(
            Doctor.full_name.ilike(term),
            Doctor.specialty.ilike(term),
            Doctor.title.ilike(term),
        ))
    if filters.featured is not None:
        query = query.filter(Doctor.featured == filters.featured)
    if filters.active is not None:
        query = query.filter(Doctor.active == filters.active)
    return query.order_by(*_by_priority(Doctor)).all()


def get_doctor(doctor_id):
    return get_or_404(Doctor, doctor_id, 'Doctor not found')


def create_doctor(data):
    with atomic(DOCTOR_UNIQUE_MESSAGES) as session:
        doctor = Doctor(**data.model_dump())
        session.add(doctor)
    logger.info("Doctor created: %s (%s)", doctor.full_name, doctor.id)
    return doctor


def update_doctor(doctor_id, data):
    doctor = get_doctor(doctor_id)
    changes = data.changes()
    _require(changes, ('full_name', 'fullName'))
    for name in ('languages', 'gallery'):
        if name in changes and changes[name] is None:
            changes[name] = []
    for name in ('active', 'featured'):
        if name in changes and changes[name] is None:
            del changes[name]

    with atomic(DOCTOR_UNIQUE_MESSAGES):
        _apply(doctor, changes)
    logger.info("Doctor updated: %s", doctor.id)
    return doctor


def delete_doctor(doctor_id):
    doctor = get_doctor(doctor_id)
    with atomic() as session:
        session.delete(doctor)
    discard_file(doctor.photo_url)
    logger.info("Doctor deleted: %s", doctor_id)


# Blogs

def list_blogs(filters):
    query = Blog.query
    if filters.q:
        term = f"%{filters.q}%"
        query = query.filter(or_(Blog.title.ilike(term), Blog.excerpt.ilike(term)))
    if filters.published is not None:
        query = query.filter(Blog.published == filters.published)
    return query.order_by(Blog.created_at.desc()).all()


def get_blog(blog_id):
    return get_or_404(Blog, blog_id, 'Blog not found')


def create_blog(data, image_url=None):
    """Create a post; the slug is derived from the title when not given."""
    values = data.model_dump()
    values['slug'] = values['slug'] or slugify(data.title)
    if not values['slug']:
        raise ValidationError('Slug is required', field='slug')
    if image_url:
        values['image_url'] = image_url

    try:
        with atomic(BLOG_UNIQUE_MESSAGES) as session:
            blog = Blog(**values)
            session.add(blog)
    except Exception:
        # The upload already happened; don't leave it orphaned
        if image_url:
            discard_file(image_url)
        raise
    logger.info("Blog created: %s (%s)", blog.slug, blog.id)
    return blog


def update_blog(blog_id, data, image_url=None):
    """
    Partial update. A new ``image_url`` replaces the stored image and
    ``removeImage`` clears it; the old file is removed after commit.
    """
    blog = get_blog(blog_id)
    previous_image = blog.image_url
    changes = data.changes('remove_image')
    _require(changes, ('title', 'title'), ('slug', 'slug'))
    if 'published' in changes and changes['published'] is None:
        del changes['published']
    if image_url:
        changes['image_url'] = image_url
    elif data.remove_image:
        changes['image_url'] = None

    try:
        with atomic(BLOG_UNIQUE_MESSAGES):
            _apply(blog, changes)
    except Exception:
        if image_url:
            discard_file(image_url)
        raise

    if previous_image and previous_image != blog.image_url:
        discard_file(previous_image)
    logger.info("Blog updated: %s", blog.id)
    return blog


def delete_blog(blog_id):
    blog = get_blog(blog_id)
    image_url = blog.image_url
    with atomic() as session:
        session.delete(blog)
    discard_file(image_url)
    logger.info("Blog deleted: %s", blog_id)


# Specialty clinics

def list_specialty_clinics():
    return SpecialtyClinic.query.order_by(SpecialtyClinic.created_at.desc()).all()


def get_specialty_clinic(clinic_id):
    return get_or_404(SpecialtyClinic, clinic_id, 'Specialty clinic not found')


def create_specialty_clinic(data):
    with atomic() as session:
        clinic = SpecialtyClinic(**data.model_dump())
        session.add(clinic)
    logger.info("Specialty clinic created: %s (%s)", clinic.name, clinic.id)
    return clinic


def update_specialty_clinic(clinic_id, data):
    clinic = get_specialty_clinic(clinic_id)
    changes = data.changes()
    _require(changes, ('title', 'title'), ('name', 'name'), ('description', 'description'), ('image', 'image'))
    with atomic():
        _apply(clinic, changes)
    logger.info("Specialty clinic updated: %s", clinic.id)
    return clinic


def delete_specialty_clinic(clinic_id):
    clinic = get_specialty_clinic(clinic_id)
    with atomic() as session:
        session.delete(clinic)
    logger.info("Specialty clinic deleted: %s", clinic_id)


# Site settings

def get_site_settings():
    """The settings row, or an unsaved default when none exists yet."""
    return SiteSettings.load() or SiteSettings(id=SITE_SETTINGS_ID, home_hero_announcement=None)


def update_site_settings(data):
    with atomic() as session:
        settings = SiteSettings.load()
        if settings is None:
            settings = SiteSettings(id=SITE_SETTINGS_ID)
            session.add(settings)
        if data.provided('home_hero_announcement'):
            settings.home_hero_announcement = data.home_hero_announcement
    logger.info("Site settings updated")
    return settings
