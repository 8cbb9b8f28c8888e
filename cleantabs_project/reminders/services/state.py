"""
reminders/services/state.py

Turns a dispatch outcome into the reminder's next persisted state.

- failed email: no write at all; the reminder stays due for the next scan
- delivered: ``completed=True`` (plus ``email_sent=True`` when an email
  went out) in a single row update, together with the successor
  occurrence for recurring reminders
"""

import logging
from dataclasses import dataclass
from typing import Optional

from reminders.exceptions import RecurrenceError

from .recurrence import build_successor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateTransition:
    reminder: object = None
    successor: object = None
    recurrence_error: Optional[str] = None


def apply_dispatch_outcome(repository, reminder, outcome) -> StateTransition:
    """
    Persist ``outcome`` for ``reminder``.

    ``ReminderNotFound`` and ``StoreUnavailable`` propagate to the caller.
    A broken recurrence only costs the successor; the reminder itself
    still completes.
    """
    if not outcome.delivered:
        return StateTransition()

    successor_fields = None
    recurrence_error = None
    if reminder.is_recurring:
        try:
            successor_fields = build_successor(reminder)
        except RecurrenceError as exc:
            recurrence_error = str(exc)
            logger.warning(
                "Skipping next occurrence for reminder %s: %s",
                reminder.pk, exc,
            )

    updated, successor = repository.complete(
        reminder.pk,
        email_sent=outcome.email_delivered,
        successor=successor_fields,
    )

    if successor is not None:
        logger.info(
            "Created next occurrence %s of reminder %s due %s",
            successor.pk, reminder.pk, successor.due_at.isoformat(),
        )

    return StateTransition(
        reminder=updated,
        successor=successor,
        recurrence_error=recurrence_error,
    )
