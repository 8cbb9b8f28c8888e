from dataclasses import dataclass, field

from django.utils import timezone

from .repository import ReminderRepository, due_predicate, upcoming_predicate


@dataclass
class ReminderStats:
    timestamp: object
    due: int = 0
    upcoming: int = 0
    rows: list = field(default_factory=list)

    def to_dict(self):
        return {
            "stats": [
                {
                    "channel": row["channel"],
                    "completed": row["completed"],
                    "email_sent": row["email_sent"],
                    "count": row["count"],
                }
                for row in self.rows
            ],
            "due": self.due,
            "upcoming": self.upcoming,
            "timestamp": self.timestamp.isoformat(),
        }


def collect_reminder_stats(repository=None, now=None) -> ReminderStats:
    """
    Read-only snapshot of the reminder table.

    Never touches the scan guard, so it answers while a scan is running.
    """
    repository = repository or ReminderRepository()
    now = now or timezone.now()

    return ReminderStats(
        timestamp=now,
        rows=repository.group_by_stats(),
        due=repository.count(due_predicate(now)),
        upcoming=repository.count(upcoming_predicate(now)),
    )
