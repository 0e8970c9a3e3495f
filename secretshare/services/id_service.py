import secrets
import string
import uuid

SHORT_ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
SHORT_ID_LENGTH = 8


def new_secret_id() -> str:
    """Random UUID4 for the secret record."""
    return str(uuid.uuid4())


def new_short_id() -> str:
    """8 characters drawn uniformly from A-Z a-z 0-9."""
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))


def redact_short_id(short_id: str, keep: int = 2) -> str:
    """Log-safe prefix of a short id."""
    return short_id[:keep] + "***"
