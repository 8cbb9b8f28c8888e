"""
reminders/services/recurrence.py

Next-occurrence math for recurring reminders.

- DAILY / WEEKLY are fixed wall-clock offsets (24h / 7×24h); DST is not
  special-cased.
- MONTHLY keeps the day of month in the following month, clamped to the
  month's last day (Jan 31 → Feb 28/29).
"""

from datetime import timedelta

from dateutil.relativedelta import relativedelta

from reminders.exceptions import RecurrenceError
from reminders.models import Reminder


RECURRENCE_STEPS = {
    Reminder.Recurrence.DAILY: timedelta(hours=24),
    Reminder.Recurrence.WEEKLY: timedelta(days=7),
    Reminder.Recurrence.MONTHLY: relativedelta(months=1),
}


def advance(moment, kind):
    """Return the occurrence after ``moment`` for a recurrence ``kind``."""
    if moment is None:
        raise RecurrenceError("No occurrence to advance from")

    try:
        step = RECURRENCE_STEPS[kind]
    except KeyError:
        raise RecurrenceError(f"Unknown recurrence kind: {kind!r}") from None

    return moment + step


def build_successor(reminder):
    """
    Field values for the occurrence that follows ``reminder``.

    The successor is due at the reminder's current ``next_occurrence_at``
    (the occurrence that just came up) and is seeded with the one after it.
    """
    if not reminder.is_recurring:
        raise RecurrenceError(f"Reminder {reminder.pk} is not recurring")

    if not reminder.recurrence_kind:
        raise RecurrenceError(f"Reminder {reminder.pk} has no recurrence kind")

    if reminder.next_occurrence_at is None:
        raise RecurrenceError(f"Reminder {reminder.pk} has no next occurrence")

    due_at = reminder.next_occurrence_at
    return {
        "title": reminder.title,
        "description": reminder.description,
        "channel": reminder.channel,
        "site_id": reminder.site_id,
        "owner_id": reminder.owner_id,
        "is_recurring": True,
        "recurrence_kind": reminder.recurrence_kind,
        "due_at": due_at,
        "next_occurrence_at": advance(due_at, reminder.recurrence_kind),
        "completed": False,
        "email_sent": False,
    }
