from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone
import logging

from reminders.exceptions import StoreUnavailable
from reminders.services import purge_completed_reminders, run_guarded_scan

logger = logging.getLogger(__name__)

SCAN_JOB_ID = "check_due_reminders"
RETENTION_JOB_ID = "purge_completed_reminders"

DEFAULT_RETENTION_SCHEDULE = {"day_of_week": "sun", "hour": 2, "minute": 0}

# ============================================================
# GLOBAL SAFETY LOCK
# Prevents scheduler from starting more than once
# ============================================================
_scheduler = None


def start_scheduler():
    """
    Start APScheduler safely.

    - Respects ENABLE_SCHEDULER setting
    - Prevents double start (Django autoreload, imports)
    - One instance per deployment: there is no cross-process lock,
      so two schedulers means duplicate emails
    """
    global _scheduler

    # --------------------------------------------
    # DEV / PROD TOGGLE
    # --------------------------------------------
    if not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    # --------------------------------------------
    # SAFETY LOCK (NO DOUBLE START)
    # --------------------------------------------
    if _scheduler is not None:
        logger.info("APScheduler already running, skipping initialization")
        return _scheduler

    logger.info("Starting APScheduler...")

    _scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)
    register_jobs(_scheduler)
    _scheduler.start()

    logger.info(
        "APScheduler started: reminder scan every %ss, retention sweep %s",
        scan_interval_seconds(),
        retention_schedule(),
    )
    return _scheduler


def shutdown_scheduler(wait=False):
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=wait)
    _scheduler = None
    logger.info("APScheduler stopped")


def register_jobs(scheduler):
    """
    Add the reminder scan and the retention sweep to ``scheduler``.
    Shared by the in-process scheduler and ``run_reminder_scheduler``.
    """
    # --------------------------------------------
    # SCAN: EVERY MINUTE (DEFAULT)
    # --------------------------------------------
    scheduler.add_job(
        run_reminder_scan,
        trigger=IntervalTrigger(seconds=scan_interval_seconds()),
        id=SCAN_JOB_ID,
        replace_existing=True,
        # Overlapping ticks are let through and dropped by scan_guard
        max_instances=2,
        coalesce=True,
    )

    # --------------------------------------------
    # RETENTION: WEEKLY (SUNDAY 02:00 DEFAULT)
    # --------------------------------------------
    scheduler.add_job(
        run_retention_sweep,
        trigger=CronTrigger(timezone=settings.TIME_ZONE, **retention_schedule()),
        id=RETENTION_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )


def scan_interval_seconds():
    return int(getattr(settings, "REMINDER_SCAN_INTERVAL_SECONDS", 60))


def retention_schedule():
    return dict(getattr(settings, "REMINDER_RETENTION_SCHEDULE", DEFAULT_RETENTION_SCHEDULE))


# ============================================================
# JOBS (NEVER RAISE INTO THE SCHEDULER)
# ============================================================

def run_reminder_scan():
    """
    Scan tick. Keeps all business logic out of the scheduler; a failed
    scan is logged and the next tick selects everything again.
    """
    close_old_connections()
    try:
        return run_guarded_scan()
    except StoreUnavailable:
        logger.exception("Reminder scan aborted: store unavailable")
    except Exception:  # noqa: BLE001
        logger.exception("Error in scheduled reminder check")
    finally:
        close_old_connections()
    return None


def run_retention_sweep():
    now = timezone.now()
    logger.info(f"Running weekly reminder cleanup at {now:%Y-%m-%d %H:%M:%S}")

    close_old_connections()
    try:
        return purge_completed_reminders(now=now)
    except Exception:  # noqa: BLE001
        logger.exception("Error in weekly reminder cleanup")
    finally:
        close_old_connections()
    return None
