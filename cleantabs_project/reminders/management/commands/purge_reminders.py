from django.core.management.base import BaseCommand, CommandError

from reminders.exceptions import StoreUnavailable
from reminders.services import purge_completed_reminders
from reminders.services.retention import retention_days


class Command(BaseCommand):
    help = "Delete completed reminders older than the retention window"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=None,
            help="Retention window in days (defaults to REMINDER_RETENTION_DAYS)",
        )

    def handle(self, *args, **options):
        days = options["days"] if options["days"] is not None else retention_days()
        if days < 0:
            raise CommandError("--days must not be negative")

        try:
            deleted = purge_completed_reminders(days=days)
        except StoreUnavailable as exc:
            raise CommandError(f"Reminder store unavailable: {exc}") from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"Removed {deleted} completed reminders older than {days} days"
            )
        )
