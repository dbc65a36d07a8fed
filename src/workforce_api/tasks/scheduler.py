"""Background task scheduler using APScheduler."""

import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from workforce_api.config import get_settings
from workforce_api.models.orm.base import utcnow

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None


async def generate_alerts_job() -> None:
    """Background job scanning tracked dates against the alert rules."""
    from workforce_api.database import async_session_maker
    from workforce_api.services.alert_service import AlertService

    logger.info("Starting scheduled alert generation")

    async with async_session_maker() as session:
        try:
            result = await AlertService(session).generate()
            logger.info(f"Scheduled alert generation completed: {result.model_dump()}")
        except Exception as e:
            logger.error(f"Scheduled alert generation failed: {e}")
            await session.rollback()


async def purge_audit_log_job() -> None:
    """Background job deleting audit entries past the retention window."""
    from workforce_api.database import async_session_maker
    from workforce_api.repositories.audit_repository import AuditRepository

    retention_days = get_settings().audit_retention_days
    cutoff = utcnow() - timedelta(days=retention_days)

    async with async_session_maker() as session:
        try:
            deleted = await AuditRepository(session).delete_older_than(cutoff)
            await session.commit()
            logger.info(f"Audit retention: deleted {deleted} entries older than {retention_days} days")
        except Exception as e:
            logger.error(f"Audit retention failed: {e}")
            await session.rollback()


async def start_scheduler() -> None:
    """Start the background task scheduler."""
    global _scheduler

    settings = get_settings()
    _scheduler = AsyncIOScheduler()

    # Alert generation (daily)
    _scheduler.add_job(
        generate_alerts_job,
        trigger=CronTrigger(hour=settings.alert_generation_hour, minute=0),
        id="generate_alerts",
        name="Generate compliance alerts",
        replace_existing=True,
    )

    # Audit log retention (daily, an hour after alerts)
    _scheduler.add_job(
        purge_audit_log_job,
        trigger=CronTrigger(hour=(settings.alert_generation_hour + 1) % 24, minute=0),
        id="purge_audit_log",
        name="Purge expired audit entries",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info("Background scheduler started")


async def stop_scheduler() -> None:
    """Stop the background task scheduler."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Background scheduler stopped")
