from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .base import Schema, OptionalText

Role = Literal['ADMIN', 'STAFF']


class UserCreate(Schema):
    email: EmailStr
    name: OptionalText = None
    role: Role = 'STAFF'
    password: str = Field(min_length=6)

    @field_validator('email')
    @classmethod
    def _lower_email(cls, value):
        return value.lower()


class UserUpdate(Schema):
    email: Optional[EmailStr] = None
    name: OptionalText = None
    role: Optional[Role] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator('email')
    @classmethod
    def _lower_email(cls, value):
        return value.lower() if value else value


class LoginRequest(Schema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
