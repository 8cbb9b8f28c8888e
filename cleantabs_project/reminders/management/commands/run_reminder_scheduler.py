"""
reminders/management/commands/run_reminder_scheduler.py

Dedicated scheduler process: the reminder scan and the weekly retention
sweep in a blocking APScheduler loop. Run exactly one of these per
deployment and keep ENABLE_SCHEDULER off in the web workers.
"""

import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from django.conf import settings
from django.core.management.base import BaseCommand

from reminders.scheduler import register_jobs, retention_schedule, scan_interval_seconds

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Run the reminder scheduler in the foreground"

    def handle(self, *args, **options):
        scheduler = BlockingScheduler(timezone=settings.TIME_ZONE)
        register_jobs(scheduler)

        self.stdout.write(
            self.style.NOTICE(
                f"Reminder scheduler running: scan every {scan_interval_seconds()}s, "
                f"retention sweep {retention_schedule()}"
            )
        )

        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Reminder scheduler stopping")
            scheduler.shutdown(wait=False)
