"""
Access gating for shared secrets.

Two read paths resolve a short id to a secret:

- Primary: mapping -> expiry -> secret record -> password -> fragments.
- Extended: mapping (expiry ignored) -> grant for the email -> grant expiry
  -> secret record -> fragments. The grant stands in for the password.

Negative outcomes are returned as ``AccessResult`` values. Only storage and
hashing failures are caught here; they become ``INTERNAL_ERROR`` after the
session is rolled back.
"""

import enum
from dataclasses import dataclass
from datetime import datetime

import structlog
from argon2.exceptions import Argon2Error, InvalidHashError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from secretshare.clock import Clock, system_clock
from secretshare.config import settings
from secretshare.models.grant import ExtendedAccessGrant
from secretshare.models.mapping import SecretMapping
from secretshare.models.secret import Secret
from secretshare.services.crypto_utils import verify_password
from secretshare.services.fragment_service import reassemble
from secretshare.services.id_service import redact_short_id
from secretshare.services.secret_service import (
    find_mapping,
    has_live_grant,
    normalize_email,
    purge_secret,
)
from secretshare.services.time_format import format_remaining

logger = structlog.get_logger()


class AccessStatus(enum.StrEnum):
    OK = "ok"
    PASSWORD_REQUIRED = "password_required"
    NOT_FOUND = "not_found"
    FRAGMENTS_MISSING = "fragments_missing"
    EXPIRED = "expired"
    INCORRECT_PASSWORD = "incorrect_password"
    FORBIDDEN = "forbidden"
    INTERNAL_ERROR = "internal_error"


MESSAGES = {
    AccessStatus.PASSWORD_REQUIRED: "Password required",
    AccessStatus.NOT_FOUND: "Secret not found",
    AccessStatus.FRAGMENTS_MISSING: "Secret fragments not found",
    AccessStatus.EXPIRED: "Secret has expired",
    AccessStatus.INCORRECT_PASSWORD: "Password is incorrect, please try again",
    AccessStatus.FORBIDDEN: "Extended access not granted for this email",
    AccessStatus.INTERNAL_ERROR: "Failed to retrieve secret",
}


@dataclass(frozen=True, slots=True)
class AccessResult:
    status: AccessStatus
    secret_text: str | None = None
    expires_at: datetime | None = None
    remaining_time: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is AccessStatus.OK

    @property
    def message(self) -> str | None:
        return MESSAGES.get(self.status)


def _result(status: AccessStatus, expires_at: datetime | None = None) -> AccessResult:
    return AccessResult(status=status, expires_at=expires_at)


def _disclose(db: Session, secret_id: str, expires_at: datetime, now: datetime) -> AccessResult:
    secret_text = reassemble(db, secret_id)
    if not secret_text:
        return _result(AccessStatus.FRAGMENTS_MISSING)
    return AccessResult(
        status=AccessStatus.OK,
        secret_text=secret_text,
        expires_at=expires_at,
        remaining_time=format_remaining(expires_at - now),
    )


def _expire(db: Session, mapping: SecretMapping, secret: Secret | None, now: datetime) -> None:
    """Purge on access past expiry, unless a live grant still needs the rows."""
    if secret is None:
        secret = db.get(Secret, mapping.secret_id)
    if secret is None:
        db.delete(mapping)
        return
    if has_live_grant(db, secret.id, now):
        logger.info("secret_expired_retained", secret_id=secret.id)
        return
    purge_secret(db, secret)


def _redeem_primary(
    db: Session,
    short_id: str,
    password: str | None,
    now: datetime,
    single_use: bool,
) -> AccessResult:
    mapping = find_mapping(db, short_id)
    if mapping is None:
        return _result(AccessStatus.NOT_FOUND)
    secret_id = mapping.secret_id

    if mapping.expires_at <= now:
        expires_at = mapping.expires_at
        _expire(db, mapping, None, now)
        db.commit()
        logger.info("secret_expired", secret_id=secret_id, source="mapping")
        return _result(AccessStatus.EXPIRED, expires_at)

    secret = db.get(Secret, secret_id)
    if secret is None:
        db.delete(mapping)
        db.commit()
        logger.warning("dangling_mapping_removed", secret_id=secret_id)
        return _result(AccessStatus.NOT_FOUND)

    if secret.expires_at <= now:
        expires_at = secret.expires_at
        _expire(db, mapping, secret, now)
        db.commit()
        logger.info("secret_expired", secret_id=secret_id, source="secret")
        return _result(AccessStatus.EXPIRED, expires_at)

    if secret.password_hash:
        if not password:
            return _result(AccessStatus.PASSWORD_REQUIRED)
        if not verify_password(password, secret.password_hash):
            logger.info("secret_password_rejected", secret_id=secret_id)
            return _result(AccessStatus.INCORRECT_PASSWORD)

    result = _disclose(db, secret.id, mapping.expires_at, now)

    if result.ok and single_use:
        purge_secret(db, secret)
        db.commit()

    logger.info("secret_redeemed", secret_id=secret_id, status=str(result.status))
    return result


def redeem_secret(
    db: Session,
    short_id: str,
    password: str | None = None,
    clock: Clock = system_clock,
    single_use: bool | None = None,
) -> AccessResult:
    """
    Primary read path for a short link.

    Expiration is checked before the password gate, so an expired protected
    secret reports EXPIRED. Successful reads leave the secret in place unless
    ``single_use`` (default: the ``single_use_secrets`` setting) is on.
    """
    if single_use is None:
        single_use = settings.single_use_secrets
    try:
        return _redeem_primary(db, short_id, password, clock.now(), single_use)
    except (SQLAlchemyError, Argon2Error, InvalidHashError):
        db.rollback()
        logger.exception("secret_redeem_failed", short_id=redact_short_id(short_id))
        return _result(AccessStatus.INTERNAL_ERROR)


def _redeem_extended(db: Session, short_id: str, email: str, now: datetime) -> AccessResult:
    mapping = find_mapping(db, short_id)
    if mapping is None:
        return _result(AccessStatus.NOT_FOUND)

    grant = (
        db.query(ExtendedAccessGrant)
        .filter(
            ExtendedAccessGrant.secret_id == mapping.secret_id,
            ExtendedAccessGrant.email == normalize_email(email),
        )
        .order_by(ExtendedAccessGrant.expires_at.desc())
        .first()
    )
    if grant is None:
        logger.info("extended_access_denied", secret_id=mapping.secret_id)
        return _result(AccessStatus.FORBIDDEN)

    if grant.expires_at <= now:
        return _result(AccessStatus.EXPIRED, grant.expires_at)

    # Grants are not purged with their secret; a purged secret reads as not found.
    secret = db.get(Secret, mapping.secret_id)
    if secret is None:
        return _result(AccessStatus.NOT_FOUND)

    result = _disclose(db, secret.id, grant.expires_at, now)
    logger.info("secret_redeemed_extended", secret_id=secret.id, status=str(result.status))
    return result


def redeem_extended(
    db: Session,
    short_id: str,
    email: str,
    clock: Clock = system_clock,
) -> AccessResult:
    """Extended read path: a live grant for ``email`` authorizes the read."""
    try:
        return _redeem_extended(db, short_id, email, clock.now())
    except SQLAlchemyError:
        db.rollback()
        logger.exception("secret_redeem_extended_failed", short_id=redact_short_id(short_id))
        return _result(AccessStatus.INTERNAL_ERROR)
