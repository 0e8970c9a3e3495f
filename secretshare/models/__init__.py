from secretshare.models.fragment import SecretFragment
from secretshare.models.grant import ExtendedAccessGrant
from secretshare.models.mapping import SecretMapping
from secretshare.models.secret import Secret

__all__ = [
    "ExtendedAccessGrant",
    "Secret",
    "SecretFragment",
    "SecretMapping",
]
