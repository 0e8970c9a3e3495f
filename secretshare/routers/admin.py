import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from secretshare.clock import Clock, get_clock
from secretshare.config import settings
from secretshare.database import get_db
from secretshare.middleware.rate_limit import limiter
from secretshare.routers.secrets import error_response
from secretshare.schemas.admin import (
    AdminExtendRequest,
    ExpiredGrantItem,
    ExpiredGrantsResponse,
    GrantExtendResponse,
)
from secretshare.schemas.secret import ErrorResponse
from secretshare.services.admin_service import extend_grant, list_expired_grants

router = APIRouter()
logger = structlog.get_logger()

MISSING_GRANT = "No redeemable extended-access grant for this email and secret"


def verify_admin_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> None:
    """Verify the operator API key for admin endpoints."""
    if not settings.admin_api_key:
        raise HTTPException(status_code=503, detail="Admin access not configured")
    if x_api_key != settings.admin_api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


@router.post(
    "/admin/extend",
    response_model=ExpiredGrantsResponse | GrantExtendResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_admin)
async def admin_extend(
    request: Request,
    body: AdminExtendRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: None = Depends(verify_admin_api_key),
):
    """
    List expired extended-access grants, or push one grant's expiry out.

    With no ``email``/``secretId`` the expired grants are listed. With both,
    the matching grant expires ``expiresDays`` + ``expiresMinutes`` from now.
    """
    if not body.is_extension:
        try:
            expired = list_expired_grants(db, clock=clock)
        except SQLAlchemyError:
            logger.exception("admin_list_failed")
            return error_response(500, "Failed to list expired grants")
        return ExpiredGrantsResponse(
            expired_grants=[
                ExpiredGrantItem(
                    grant_id=item.grant_id,
                    secret_id=item.secret_id,
                    short_id=item.short_id,
                    email=item.email,
                    expires_at=item.expires_at,
                    expires_at_human=item.expires_at_human,
                )
                for item in expired
            ]
        )

    try:
        extension = extend_grant(
            db,
            email=body.email,
            secret_id=body.secret_id,
            expires_days=body.expires_days,
            expires_minutes=body.expires_minutes,
            clock=clock,
        )
    except SQLAlchemyError:
        logger.exception("admin_extend_failed", secret_id=body.secret_id)
        return error_response(500, "Failed to extend grant")

    if extension is None:
        return error_response(404, MISSING_GRANT)

    return GrantExtendResponse(
        message=f"Extended access until {extension.expires_at.isoformat()}Z",
        expires_at=extension.expires_at,
        remaining_time=extension.remaining_time,
    )
