import re
from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from secretshare.config import settings

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def serialize_utc(value: datetime) -> str:
    """Stored datetimes are naive UTC; emit them with an explicit Z."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat() + "Z"


UTCDateTime = Annotated[datetime, PlainSerializer(serialize_utc, return_type=str)]


def validate_email_format(v: str | None) -> str | None:
    if v is None or v.strip() == "":
        return None
    v = v.strip()
    if len(v) > 254 or not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email format")
    return v


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SecretCreate(CamelModel):
    secret_text: str = Field(..., min_length=1)
    expires_days: int = Field(default_factory=lambda: settings.default_expiry_days, ge=0)
    expires_minutes: int = Field(0, ge=0)
    password: str | None = None
    extendable: bool = False
    email: str | None = None

    @field_validator("secret_text")
    @classmethod
    def validate_secret_text(cls, v: str) -> str:
        if len(v) > settings.max_secret_length:
            raise ValueError(f"Secret text exceeds {settings.max_secret_length} characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return validate_email_format(v)

    @model_validator(mode="after")
    def validate_lifetime(self) -> "SecretCreate":
        total_minutes = self.expires_days * 24 * 60 + self.expires_minutes
        if total_minutes <= 0:
            raise ValueError("Expiration must be in the future")
        if total_minutes > settings.max_expiry_days * 24 * 60:
            raise ValueError(f"Expiration cannot exceed {settings.max_expiry_days} days")
        return self


class SecretCreateResponse(CamelModel):
    short_url: str
    short_id: str
    expires_at: UTCDateTime


class SecretPasswordSubmit(CamelModel):
    password: str | None = None


class SecretExtendedRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        validated = validate_email_format(v)
        if validated is None:
            raise ValueError("Email is required")
        return validated


class SecretRetrieveResponse(CamelModel):
    password_required: bool = False
    secret_text: str | None = None
    expires_at: UTCDateTime | None = None
    remaining_time: str | None = None


class ErrorResponse(CamelModel):
    error: str
    expires_at: UTCDateTime | None = None
