from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from sqlalchemy.orm import Session

from secretshare.clock import Clock, system_clock
from secretshare.models.grant import ExtendedAccessGrant
from secretshare.models.mapping import SecretMapping
from secretshare.models.secret import Secret
from secretshare.services.secret_service import normalize_email
from secretshare.services.time_format import format_remaining, format_timestamp

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class ExpiredGrant:
    grant_id: str
    secret_id: str
    short_id: str | None
    email: str
    expires_at: datetime
    expires_at_human: str


@dataclass(frozen=True, slots=True)
class GrantExtension:
    expires_at: datetime
    remaining_time: str
    updated: int


def list_expired_grants(db: Session, clock: Clock = system_clock) -> list[ExpiredGrant]:
    """
    Every grant whose expiration has passed, oldest first.

    ``short_id`` is None when the secret's mapping has already been purged.
    """
    now = clock.now()
    rows = (
        db.query(ExtendedAccessGrant, SecretMapping.short_id)
        .outerjoin(SecretMapping, SecretMapping.secret_id == ExtendedAccessGrant.secret_id)
        .filter(ExtendedAccessGrant.expires_at <= now)
        .order_by(ExtendedAccessGrant.expires_at.asc())
        .all()
    )
    return [
        ExpiredGrant(
            grant_id=grant.id,
            secret_id=grant.secret_id,
            short_id=short_id,
            email=grant.email,
            expires_at=grant.expires_at,
            expires_at_human=format_timestamp(grant.expires_at),
        )
        for grant, short_id in rows
    ]


def extend_grant(
    db: Session,
    email: str,
    secret_id: str,
    expires_days: int = 0,
    expires_minutes: int = 0,
    clock: Clock = system_clock,
) -> GrantExtension | None:
    """
    Set the matching grant's expiration to now + offset.

    The new value never depends on the previous expiration. Returns None when
    no grant exists for (secret_id, email), or when the secret itself has been
    purged and the grant can no longer be redeemed.
    """
    now = clock.now()
    if db.get(Secret, secret_id) is None:
        logger.info("grant_extend_skipped", secret_id=secret_id, reason="secret_purged")
        return None
    new_expires_at = now + timedelta(days=expires_days, minutes=expires_minutes)

    try:
        updated = (
            db.query(ExtendedAccessGrant)
            .filter(
                ExtendedAccessGrant.secret_id == secret_id,
                ExtendedAccessGrant.email == normalize_email(email),
            )
            .update(
                {"expires_at": new_expires_at, "updated_at": now},
                synchronize_session=False,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    if not updated:
        return None

    logger.info(
        "grant_extended",
        secret_id=secret_id,
        grants_updated=updated,
        expires_days=expires_days,
        expires_minutes=expires_minutes,
    )
    return GrantExtension(
        expires_at=new_expires_at,
        remaining_time=format_remaining(new_expires_at - now),
        updated=updated,
    )
