from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from sqlalchemy.orm import Session

from secretshare.clock import Clock, system_clock
from secretshare.config import settings
from secretshare.models.grant import ExtendedAccessGrant
from secretshare.models.mapping import SecretMapping
from secretshare.models.secret import Secret
from secretshare.services.crypto_utils import hash_password
from secretshare.services.fragment_service import store_fragments
from secretshare.services.id_service import new_secret_id, new_short_id

logger = structlog.get_logger()


class ShortIdExhaustedError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class CreatedSecret:
    secret_id: str
    short_id: str
    expires_at: datetime
    grant_id: str | None = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_share_url(short_id: str) -> str:
    return f"{settings.share_base_url.rstrip('/')}/share/{short_id}"


def allocate_short_id(db: Session, max_attempts: int | None = None) -> str:
    """Generate a short id not used by any stored mapping."""
    attempts = max_attempts or settings.short_id_max_attempts
    for _ in range(attempts):
        short_id = new_short_id()
        taken = db.query(SecretMapping.id).filter(SecretMapping.short_id == short_id).first()
        if taken is None:
            return short_id
        logger.warning("short_id_collision", attempts=attempts)
    raise ShortIdExhaustedError(f"No free short id after {attempts} attempts")


def create_secret(
    db: Session,
    secret_text: str,
    expires_days: int | None = None,
    expires_minutes: int = 0,
    password: str | None = None,
    extendable: bool = False,
    email: str | None = None,
    clock: Clock = system_clock,
) -> CreatedSecret:
    """
    Persist a secret with its fragments, short-link mapping and optional grant.

    Everything is written in one commit. A grant is only created for
    extendable secrets that name an email. Its access
    runs ``grant_expiry_days`` past the secret's own expiration.
    """
    if not secret_text:
        raise ValueError("Secret text cannot be empty")

    if expires_days is None:
        expires_days = settings.default_expiry_days

    now = clock.now()
    expires_at = now + timedelta(days=expires_days, minutes=expires_minutes)
    if expires_at <= now:
        raise ValueError("Expiration must be in the future")

    normalized_email = normalize_email(email) if email else None

    secret_id = new_secret_id()
    short_id = allocate_short_id(db)

    fragment_count = store_fragments(db, secret_id, secret_text)
    secret = Secret(
        id=secret_id,
        password_hash=hash_password(password) if password else None,
        created_at=now,
        expires_at=expires_at,
        fragment_count=fragment_count,
        extendable=extendable,
        email=normalized_email,
    )
    db.add(secret)
    db.add(
        SecretMapping(
            short_id=short_id,
            secret_id=secret_id,
            created_at=now,
            expires_at=expires_at,
        )
    )

    grant = None
    if extendable and normalized_email:
        grant = ExtendedAccessGrant(
            secret_id=secret_id,
            email=normalized_email,
            expires_at=expires_at + timedelta(days=settings.grant_expiry_days),
            created_at=now,
            updated_at=now,
        )
        db.add(grant)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "secret_created",
        secret_id=secret_id,
        fragment_count=fragment_count,
        password_protected=secret.password_hash is not None,
        extendable=extendable,
        has_grant=grant is not None,
    )

    return CreatedSecret(
        secret_id=secret_id,
        short_id=short_id,
        expires_at=expires_at,
        grant_id=grant.id if grant is not None else None,
    )


def find_mapping(db: Session, short_id: str) -> SecretMapping | None:
    return db.query(SecretMapping).filter(SecretMapping.short_id == short_id).first()


def has_live_grant(db: Session, secret_id: str, now: datetime) -> bool:
    """True when some grant still lets a recipient read this secret."""
    return (
        db.query(ExtendedAccessGrant.id)
        .filter(
            ExtendedAccessGrant.secret_id == secret_id,
            ExtendedAccessGrant.expires_at > now,
        )
        .first()
        is not None
    )


def purge_secret(db: Session, secret: Secret) -> None:
    """
    Active -> Purged: delete the secret with its fragments and mappings.

    Grants are kept. Does not commit; the purge belongs to the caller's
    transaction.
    """
    db.delete(secret)
    logger.info("secret_purged", secret_id=secret.id)


def purge_expired_secrets(db: Session, clock: Clock = system_clock) -> int:
    """
    Purge every secret whose own expiration has passed and that no live grant
    still references. Returns the number purged.
    """
    now = clock.now()
    expired = db.query(Secret).filter(Secret.expires_at <= now).all()

    purged = 0
    for secret in expired:
        if has_live_grant(db, secret.id, now):
            continue
        purge_secret(db, secret)
        purged += 1

    db.commit()
    return purged
