from secretshare.schemas.admin import (
    AdminExtendRequest,
    ExpiredGrantItem,
    ExpiredGrantsResponse,
    GrantExtendResponse,
)
from secretshare.schemas.secret import (
    ErrorResponse,
    SecretCreate,
    SecretCreateResponse,
    SecretExtendedRequest,
    SecretPasswordSubmit,
    SecretRetrieveResponse,
)

__all__ = [
    "AdminExtendRequest",
    "ErrorResponse",
    "ExpiredGrantItem",
    "ExpiredGrantsResponse",
    "GrantExtendResponse",
    "SecretCreate",
    "SecretCreateResponse",
    "SecretExtendedRequest",
    "SecretPasswordSubmit",
    "SecretRetrieveResponse",
]
