import json

from django.core.management.base import BaseCommand

from reminders.services import collect_reminder_stats


class Command(BaseCommand):
    help = "Print reminder counts by channel and delivery state"

    def handle(self, *args, **options):
        stats = collect_reminder_stats()
        self.stdout.write(json.dumps(stats.to_dict(), indent=2))
