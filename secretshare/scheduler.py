"""Optional background sweep for expired secrets nobody came back for."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from secretshare.config import settings
from secretshare.database import SessionLocal
from secretshare.services.secret_service import purge_expired_secrets

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def cleanup_job() -> None:
    """Purge expired secrets that no live grant still references."""
    db = SessionLocal()
    try:
        purged = purge_expired_secrets(db)
        if purged:
            logger.info(f"Cleanup: purged {purged} expired secrets")
    except Exception:
        db.rollback()
        logger.exception("Cleanup failed")
    finally:
        db.close()


def start_scheduler() -> None:
    scheduler.add_job(
        cleanup_job,
        trigger=IntervalTrigger(hours=settings.cleanup_interval_hours),
        id="purge_expired_secrets",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started - cleanup runs every {settings.cleanup_interval_hours} hour(s)")


def shutdown_scheduler() -> None:
    scheduler.shutdown()
    logger.info("Scheduler stopped")
