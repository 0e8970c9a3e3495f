import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from secretshare.clock import Clock, get_clock
from secretshare.config import settings
from secretshare.database import get_db
from secretshare.middleware.rate_limit import limiter
from secretshare.schemas.secret import (
    ErrorResponse,
    SecretCreate,
    SecretCreateResponse,
    SecretExtendedRequest,
    SecretPasswordSubmit,
    SecretRetrieveResponse,
)
from secretshare.services.access_service import (
    AccessResult,
    AccessStatus,
    redeem_extended,
    redeem_secret,
)
from secretshare.services.secret_service import (
    ShortIdExhaustedError,
    build_share_url,
    create_secret,
)

router = APIRouter()
logger = structlog.get_logger()

STATUS_CODES = {
    AccessStatus.NOT_FOUND: 404,
    AccessStatus.FRAGMENTS_MISSING: 404,
    AccessStatus.EXPIRED: 410,
    AccessStatus.INCORRECT_PASSWORD: 401,
    AccessStatus.FORBIDDEN: 403,
    AccessStatus.INTERNAL_ERROR: 500,
}

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    410: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    body = ErrorResponse(error=message, **extra)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def access_response(result: AccessResult):
    """Translate an engine outcome into the HTTP response shape."""
    if result.status is AccessStatus.OK:
        return SecretRetrieveResponse(
            secret_text=result.secret_text,
            expires_at=result.expires_at,
            remaining_time=result.remaining_time,
        )
    if result.status is AccessStatus.PASSWORD_REQUIRED:
        return SecretRetrieveResponse(password_required=True)
    if result.status is AccessStatus.EXPIRED:
        return error_response(410, result.message, expires_at=result.expires_at)
    return error_response(STATUS_CODES[result.status], result.message)


@router.post(
    "/secrets",
    response_model=SecretCreateResponse,
    status_code=201,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_creates)
async def create_new_secret(
    request: Request,
    secret_data: SecretCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Store a secret and return its share link.

    The link stays readable until it expires; see ``single_use_secrets``.
    """
    try:
        created = create_secret(
            db=db,
            secret_text=secret_data.secret_text,
            expires_days=secret_data.expires_days,
            expires_minutes=secret_data.expires_minutes,
            password=secret_data.password,
            extendable=secret_data.extendable,
            email=secret_data.email,
            clock=clock,
        )
    except (SQLAlchemyError, ShortIdExhaustedError):
        logger.exception("secret_create_failed")
        return error_response(500, "Failed to create secret")

    return SecretCreateResponse(
        short_url=build_share_url(created.short_id),
        short_id=created.short_id,
        expires_at=created.expires_at,
    )


@router.get(
    "/secrets/{short_id}",
    response_model=SecretRetrieveResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
@limiter.limit(settings.rate_limit_retrieves)
async def retrieve_secret_endpoint(
    request: Request,
    short_id: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Redeem a share link without a password."""
    return access_response(redeem_secret(db, short_id, clock=clock))


@router.post(
    "/secrets/{short_id}",
    response_model=SecretRetrieveResponse,
    response_model_exclude_none=True,
    responses={**ERROR_RESPONSES, 401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_retrieves)
async def submit_password(
    request: Request,
    short_id: str,
    body: SecretPasswordSubmit | None = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Redeem a share link, submitting a password if the secret has one.

    An empty body behaves like the GET endpoint.
    """
    password = body.password if body is not None else None
    return access_response(redeem_secret(db, short_id, password=password, clock=clock))


@router.post(
    "/secrets/{short_id}/extended",
    response_model=SecretRetrieveResponse,
    response_model_exclude_none=True,
    responses={**ERROR_RESPONSES, 403: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_retrieves)
async def retrieve_extended(
    request: Request,
    short_id: str,
    body: SecretExtendedRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Redeem a share link through an extended-access grant.

    Works after the link's own expiry as long as the grant for this email is
    live. No password is asked for on this path.
    """
    return access_response(redeem_extended(db, short_id, body.email, clock=clock))
