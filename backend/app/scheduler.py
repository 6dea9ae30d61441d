import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import SQLAlchemyError

from app.errors import UpstreamFailure

logger = logging.getLogger(__name__)

scheduler: BackgroundScheduler | None = None


def cleanup_expired_tokens() -> int:
    """Delete verification tokens whose expiry has passed.

    Returns the number of tokens deleted.
    """
    from app.database import SessionLocal
    from app.services.tokens import purge_expired_tokens

    logger.info("Running expired token cleanup...")

    db = SessionLocal()
    deleted = 0
    try:
        deleted = purge_expired_tokens(db)
        logger.info("Deleted %s expired verification tokens", deleted)
    except (SQLAlchemyError, UpstreamFailure) as e:
        logger.error("Expired token cleanup failed: %s", e)
        db.rollback()
    finally:
        db.close()

    return deleted


def start_scheduler():
    """Start the APScheduler with the token cleanup job (hourly, on the hour)."""
    global scheduler
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        cleanup_expired_tokens,
        CronTrigger(minute=0),
        id="cleanup_expired_tokens",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started with hourly expired token cleanup")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    global scheduler
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Scheduler shut down")
