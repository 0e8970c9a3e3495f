"""
Request logging middleware with correlation IDs.

Every request gets an 8-character correlation ID that is bound to the structlog
context and echoed back in the X-Correlation-ID header, including on 500s.

Privacy: request bodies, query strings, IPs and headers are never logged. Paths
are logged with the short id cut down by ``redact_path``.
"""

import re
import secrets
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from secretshare.services.id_service import redact_short_id

CORRELATION_HEADER = "X-Correlation-ID"
SECRET_PATH_RE = re.compile(r"(/secrets/)([^/]+)")


def generate_correlation_id() -> str:
    """Generate an 8-character correlation ID."""
    return secrets.token_hex(4)


def redact_path(path: str) -> str:
    return SECRET_PATH_RE.sub(lambda m: m.group(1) + redact_short_id(m.group(2)), path)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = generate_correlation_id()
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        logger = structlog.get_logger()
        logger.info("request_started", method=request.method, path=redact_path(request.url.path))

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=redact_path(request.url.path),
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
                exc_info=True,
            )
            response = JSONResponse(status_code=500, content={"error": "Internal Server Error"})
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "request_completed",
            method=request.method,
            path=redact_path(request.url.path),
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
