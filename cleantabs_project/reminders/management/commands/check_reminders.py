"""
reminders/management/commands/check_reminders.py

Runs one reminder scan on demand (same guard as the scheduler).
Handy for cron-driven deployments and for operational testing.
"""

import json

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from reminders.exceptions import StoreUnavailable
from reminders.services import run_guarded_scan


class Command(BaseCommand):
    help = "Scan for due reminders and deliver them"

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the scan summary as JSON",
        )

    def handle(self, *args, **options):
        now = timezone.now()

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting reminder scan"
            )
        )

        try:
            summary = run_guarded_scan()
        except StoreUnavailable as exc:
            raise CommandError(f"Reminder store unavailable: {exc}") from exc

        if summary is None:
            self.stdout.write(self.style.WARNING("A reminder scan is already running, nothing to do"))
            return

        if options["json"]:
            self.stdout.write(json.dumps(summary.to_dict(), indent=2))
            return

        for outcome in summary.outcomes:
            if outcome.status == outcome.FAILED:
                self.stdout.write(
                    self.style.ERROR(
                        f"  reminder {outcome.reminder_id}: {outcome.error} ({outcome.details})"
                    )
                )

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: "
                f"{summary.processed_count} processed, "
                f"{summary.error_count} errors, "
                f"{summary.skipped_count} skipped"
            )
        )
