from pydantic import Field, model_validator

from secretshare.config import settings
from secretshare.schemas.secret import CamelModel, UTCDateTime

MINUTES_PER_DAY = 24 * 60


class AdminExtendRequest(CamelModel):
    """
    Body of POST /admin/extend.

    An empty body lists expired grants; ``email`` plus ``secretId`` extends one.
    """

    email: str | None = None
    secret_id: str | None = None
    expires_days: int = Field(0, ge=0, le=3650)
    expires_minutes: int = Field(0, ge=0, le=3650 * MINUTES_PER_DAY)

    @model_validator(mode="after")
    def validate_shape(self) -> "AdminExtendRequest":
        if (self.email is None) != (self.secret_id is None):
            raise ValueError("email and secretId must be given together")
        return self

    @model_validator(mode="after")
    def validate_offset(self) -> "AdminExtendRequest":
        total_minutes = self.expires_days * MINUTES_PER_DAY + self.expires_minutes
        if total_minutes > settings.max_grant_extension_days * MINUTES_PER_DAY:
            raise ValueError(
                f"Extension cannot exceed {settings.max_grant_extension_days} days"
            )
        return self

    @property
    def is_extension(self) -> bool:
        return self.email is not None and self.secret_id is not None


class ExpiredGrantItem(CamelModel):
    grant_id: str
    secret_id: str
    short_id: str | None = None
    email: str
    expires_at: UTCDateTime
    expires_at_human: str


class ExpiredGrantsResponse(CamelModel):
    expired_grants: list[ExpiredGrantItem]


class GrantExtendResponse(CamelModel):
    message: str
    expires_at: UTCDateTime
    remaining_time: str
