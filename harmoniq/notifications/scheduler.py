"""
Harmoniq Safety - Notification scheduler

Own APScheduler BackgroundScheduler instance running the maintenance scan.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from .. import config
from .scan import scan_all

logger = logging.getLogger("harmoniq.notifications.scheduler")

_scheduler = None


def get_scheduler() -> BackgroundScheduler:
    """Get or create the singleton scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = BackgroundScheduler(
            job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 120}
        )
    return _scheduler


def run_maintenance_scan():
    """Scheduler entry point; a failed run is logged and retried on the next tick."""
    try:
        results = scan_all()
        logger.debug("[Scheduler] Maintenance scan done: %s", results)
    except Exception:
        logger.exception("[Scheduler] Maintenance scan failed")


def init_scheduler():
    """Register and start the scan job."""
    scheduler = get_scheduler()
    if scheduler.running:
        return scheduler

    scheduler.add_job(
        run_maintenance_scan,
        "interval",
        minutes=config.SCHEDULER_INTERVAL_MINUTES,
        id="maintenance_scan",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("[Scheduler] Started; maintenance scan every %d min", config.SCHEDULER_INTERVAL_MINUTES)
    return scheduler


def shutdown_scheduler():
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("[Scheduler] Stopped")
    _scheduler = None
