"""
structlog setup for the secret sharing service.

JSON lines when LOG_FORMAT=json, colored console output otherwise.
Everything goes to stdout; secret text and passwords are never passed to a logger.
"""

import logging
import sys

import structlog

from secretshare.config import settings


def setup_logging() -> None:
    """
    Configure structlog and route stdlib logging through the same stream.

    Safe to call more than once; the last call wins.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # APScheduler, SQLAlchemy and uvicorn log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.INFO)


def get_logger(name: str | None = None):
    """Return a structlog logger, optionally bound to a logger name."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
