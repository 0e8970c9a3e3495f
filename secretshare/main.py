from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import inspect

from secretshare.config import settings
from secretshare.database import engine
from secretshare.logging_config import get_logger, setup_logging
from secretshare.middleware.logging import LoggingMiddleware
from secretshare.middleware.rate_limit import limiter
from secretshare.routers import admin, secrets
from secretshare.scheduler import shutdown_scheduler, start_scheduler

# Database tables are managed by Alembic migrations
# Run: alembic upgrade head
REQUIRED_TABLES = {"secrets", "secret_fragments", "secret_mappings", "access_grants"}

setup_logging()
logger = get_logger(__name__)


def check_database_tables() -> None:
    """Fail fast when migrations have not been applied."""
    existing = set(inspect(engine).get_table_names())
    missing = REQUIRED_TABLES - existing
    if missing:
        raise RuntimeError(
            f"Database tables missing: {', '.join(sorted(missing))}. "
            "Run `alembic upgrade head` before starting the server."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Verify the schema, then start/stop the optional cleanup scheduler."""
    check_database_tables()
    if settings.cleanup_enabled:
        start_scheduler()
    logger.info("app_started", cleanup_enabled=settings.cleanup_enabled)
    yield
    if settings.cleanup_enabled:
        shutdown_scheduler()


app = FastAPI(
    title="SecretShare",
    description="Time-bounded, optionally password-protected secret sharing links",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request logging / correlation IDs
app.add_middleware(LoggingMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(secrets.router, prefix="/api/v1", tags=["secrets"])
app.include_router(admin.router, prefix="/api/v1", tags=["admin"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
