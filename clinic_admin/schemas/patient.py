from datetime import date
from typing import List, Optional

from pydantic import Field, field_validator

from .base import Schema, OptionalEmail, OptionalText, Phone, Text, blank_to_none


class PatientCreate(Schema):
    first_name: Text
    last_name: Text
    phone: Phone = None
    email: OptionalEmail = None
    dob: Optional[date] = None
    notes: Optional[str] = None
    service_ids: List[Text] = Field(default_factory=list)

    @field_validator('dob', mode='before')
    @classmethod
    def _blank_dob(cls, value):
        return blank_to_none(value)


class PatientUpdate(Schema):
    first_name: Optional[Text] = None
    last_name: Optional[Text] = None
    phone: Phone = None
    email: OptionalEmail = None
    dob: Optional[date] = None
    notes: Optional[str] = None
    service_ids: Optional[List[Text]] = None

    @field_validator('dob', mode='before')
    @classmethod
    def _blank_dob(cls, value):
        return blank_to_none(value)


class PatientRegistration(Schema):
    """Self-registration from the patient portal."""
    first_name: Text
    last_name: Text
    email: OptionalEmail
    phone: Phone = None
    password: str = Field(min_length=8)
    confirm_password: str = Field(min_length=1)

    @field_validator('email')
    @classmethod
    def _email_required(cls, value):
        if not value:
            raise ValueError('Enter a valid email')
        return value.lower()

    @field_validator('confirm_password')
    @classmethod
    def _passwords_match(cls, value, info):
        password = info.data.get('password')
        if password is not None and value != password:
            raise ValueError('Passwords do not match')
        return value


class PatientAccountCreate(Schema):
    patient_id: Text
    email: OptionalEmail
    password: str = Field(min_length=8)

    @field_validator('email')
    @classmethod
    def _email_required(cls, value):
        if not value:
            raise ValueError('Email is required')
        return value.lower()


class PatientSearch(Schema):
    email: OptionalEmail = None
    q: OptionalText = None
