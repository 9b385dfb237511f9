"""
Schemas for website catalog content: services, doctors, blogs, specialty
clinics and site settings.
"""
from typing import Annotated, Optional

from pydantic import AfterValidator, Field

from .base import BoundedText, Schema, OptionalEmail, OptionalText, Phone, Priority, RecordId, StringList, Text


def _at_least_one_image(items):
    if not items:
        raise ValueError('At least one image is required')
    return items


Images = Annotated[StringList, AfterValidator(_at_least_one_image)]
ShortDescription = BoundedText(200)
Duration = Optional[Annotated[int, Field(ge=1, le=480)]]


# Services

class ServiceCreate(Schema):
    name: Text
    description: Text
    short_description: ShortDescription = None
    priority: Priority = None
    duration_minutes: Duration = None
    active: bool = True
    parent_id: RecordId = None
    images: Images


class ServiceUpdate(Schema):
    name: Optional[Text] = None
    description: Optional[Text] = None
    short_description: ShortDescription = None
    priority: Priority = None
    duration_minutes: Duration = None
    active: Optional[bool] = None
    parent_id: RecordId = None
    images: Optional[Images] = None


# Doctors

class DoctorCreate(Schema):
    full_name: Text
    title: OptionalText = None
    specialty: OptionalText = None
    short_bio: BoundedText(240) = None
    bio: OptionalText = None
    email: OptionalEmail = None
    phone: Phone = None
    years_experience: Optional[Annotated[int, Field(ge=0, le=80)]] = None
    priority: Priority = None
    languages: StringList = Field(default_factory=list)
    photo_url: OptionalText = None
    gallery: StringList = Field(default_factory=list)
    active: bool = True
    featured: bool = False


class DoctorUpdate(Schema):
    full_name: Optional[Text] = None
    title: OptionalText = None
    specialty: OptionalText = None
    short_bio: BoundedText(240) = None
    bio: OptionalText = None
    email: OptionalEmail = None
    phone: Phone = None
    years_experience: Optional[Annotated[int, Field(ge=0, le=80)]] = None
    priority: Priority = None
    languages: Optional[StringList] = None
    photo_url: OptionalText = None
    gallery: Optional[StringList] = None
    active: Optional[bool] = None
    featured: Optional[bool] = None


# Blogs

class BlogCreate(Schema):
    title: Text
    slug: OptionalText = None
    excerpt: OptionalText = None
    content: OptionalText = None
    published: bool = False
    image_url: OptionalText = None


class BlogUpdate(Schema):
    title: Optional[Text] = None
    slug: Optional[Text] = None
    excerpt: OptionalText = None
    content: OptionalText = None
    published: Optional[bool] = None
    image_url: OptionalText = None
    remove_image: bool = False


# Specialty clinics

class SpecialtyClinicCreate(Schema):
    title: Text
    name: Text
    description: Text
    image: Text


class SpecialtyClinicUpdate(Schema):
    title: Optional[Text] = None
    name: Optional[Text] = None
    description: Optional[Text] = None
    image: Optional[Text] = None


# Site settings

class SiteSettingsUpdate(Schema):
    home_hero_announcement: BoundedText(200) = None


# Listing filters

class ContentFilters(Schema):
    q: OptionalText = None
    active: Optional[bool] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None

    @classmethod
    def from_args(cls, args):
        return {key: args.get(key) or None for key in ('q', 'active', 'featured', 'published')}
