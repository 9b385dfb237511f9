"""
Website content records: blog posts, specialty clinics and the site settings
singleton.
"""
from clinic_admin.extensions import db
from .base import TimestampMixin, generate_id, isoformat

SITE_SETTINGS_ID = 'site'


class Blog(db.Model, TimestampMixin):
    __tablename__ = 'blogs'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text)
    content = db.Column(db.Text)
    published = db.Column(db.Boolean, default=False, nullable=False)
    image_url = db.Column(db.String(1024))

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'excerpt': self.excerpt,
            'content': self.content,
            'published': self.published,
            'imageUrl': self.image_url,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class SpecialtyClinic(db.Model, TimestampMixin):
    __tablename__ = 'specialty_clinics'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    title = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(1024), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'name': self.name,
            'description': self.description,
            'image': self.image,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class SiteSettings(db.Model, TimestampMixin):
    """Single row keyed by SITE_SETTINGS_ID."""
    __tablename__ = 'site_settings'

    id = db.Column(db.String(32), primary_key=True, default=SITE_SETTINGS_ID)
    home_hero_announcement = db.Column(db.String(200))

    @classmethod
    def load(cls):
        return db.session.get(cls, SITE_SETTINGS_ID)

    def to_dict(self):
        return {
            'id': self.id,
            'homeHeroAnnouncement': self.home_hero_announcement,
            'updatedAt': isoformat(self.updated_at),
        }
