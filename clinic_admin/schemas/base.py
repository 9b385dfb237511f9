"""
Shared pydantic plumbing: camelCase request bodies, trimmed string types and
a ``load`` helper that turns pydantic failures into ValidationError.
"""
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from clinic_admin.errors import ValidationError


def blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _unique(items):
    return list(dict.fromkeys(items))


# Required, trimmed, non-empty
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Optional text where "" and whitespace mean "no value"
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]

# Identifier of another record; blanks count as absent
RecordId = Annotated[Optional[str], BeforeValidator(blank_to_none)]

OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(blank_to_none)]

Phone = Annotated[
    Optional[Annotated[str, StringConstraints(min_length=5)]],
    BeforeValidator(blank_to_none),
]

# De-duplicated list of non-empty strings, order preserved
StringList = Annotated[List[Text], AfterValidator(_unique)]

Priority = Optional[Annotated[int, Field(ge=0, le=1000)]]


def BoundedText(max_length):
    """Optional trimmed text capped at ``max_length`` characters."""
    return Annotated[
        Optional[Annotated[str, StringConstraints(max_length=max_length)]],
        BeforeValidator(blank_to_none),
    ]


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    def provided(self, name):
        """True when the client sent the field, even as null."""
        return name in self.model_fields_set

    def changes(self, *exclude):
        """Fields the client sent, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in exclude
        }


def load(schema_cls, data):
    """Validate ``data`` against ``schema_cls`` or raise ValidationError."""
    if data is None:
        message = 'Request body must be JSON'
        raise ValidationError(message, details=[{'field': None, 'message': message}])
    try:
        return schema_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc
