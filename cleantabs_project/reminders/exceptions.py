"""
Errors raised by the reminder engine.

A scan isolates per-reminder failures (``ReminderNotFound``,
``RecurrenceError``, failed sends) and aborts only on ``StoreUnavailable``.
"""


class ReminderEngineError(Exception):
    """Base class for reminder engine errors."""


class StoreUnavailable(ReminderEngineError):
    """The reminder store could not be read or written."""


class ReminderNotFound(ReminderEngineError):
    """The reminder vanished or was completed by someone else mid-scan."""

    def __init__(self, reminder_id):
        self.reminder_id = reminder_id
        super().__init__(f"Reminder {reminder_id} not found")


class RecurrenceError(ReminderEngineError):
    """Recurrence metadata on a reminder cannot produce a next occurrence."""
