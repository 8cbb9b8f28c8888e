"""
reminders/services/engine.py

One scan over due reminders:

    select due → dispatch per channel → apply state (+ next occurrence)

Failures of one reminder never stop the others; they are collected into
the scan's ``ScanSummary``. Only ``StoreUnavailable`` aborts a scan.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.utils import timezone

from reminders.exceptions import ReminderNotFound, StoreUnavailable

from .dispatch import dispatch_reminder
from .guard import scan_guard
from .mailer import DjangoEmailSender
from .repository import ReminderRepository
from .state import apply_dispatch_outcome

logger = logging.getLogger(__name__)


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass
class ReminderOutcome:
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    reminder_id: int
    status: str
    channel: str
    site_name: Optional[str] = None
    recipient: Optional[str] = None
    email_sent: bool = False
    message_id: Optional[str] = None
    successor_id: Optional[int] = None
    error: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self):
        return {
            "id": self.reminder_id,
            "status": self.status,
            "reminder_type": self.channel,
            "site_name": self.site_name,
            "recipient": self.recipient,
            "email_sent": self.email_sent,
            "message_id": self.message_id,
            "successor_id": self.successor_id,
            "error": self.error,
            "details": self.details,
        }


@dataclass
class ScanSummary:
    started_at: object
    finished_at: object = None
    outcomes: list = field(default_factory=list)

    def _with_status(self, status):
        return [o for o in self.outcomes if o.status == status]

    @property
    def processed_count(self):
        return len(self._with_status(ReminderOutcome.COMPLETED))

    @property
    def error_count(self):
        return len(self._with_status(ReminderOutcome.FAILED))

    @property
    def skipped_count(self):
        return len(self._with_status(ReminderOutcome.SKIPPED))

    def to_dict(self):
        return {
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "skipped_count": self.skipped_count,
            "reminders": [o.to_dict() for o in self.outcomes],
            "errors": [
                {
                    "reminder_id": o.reminder_id,
                    "error": o.error,
                    "details": o.details,
                }
                for o in self._with_status(ReminderOutcome.FAILED)
            ],
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


# ============================================================
# SCANNER
# ============================================================

class ReminderScanner:

    def __init__(self, repository=None, sender=None, clock=None):
        self.repository = repository or ReminderRepository()
        self.sender = sender or DjangoEmailSender()
        self.clock = clock or timezone.now

    def scan(self, now=None) -> ScanSummary:
        """
        Process every reminder due at ``now``.

        Raises ``StoreUnavailable`` if the store cannot be reached for
        selection or for an update; the caller retries on the next tick.
        """
        now = now or self.clock()
        summary = ScanSummary(started_at=now)

        logger.info("Checking for due reminders at %s", now.isoformat())
        due = self.repository.find_due(now)
        logger.info("Found %s due reminders", len(due))

        for reminder in due:
            summary.outcomes.append(self._process(reminder))

        summary.finished_at = self.clock()
        logger.info(
            "Reminder scan finished: processed=%s errors=%s skipped=%s",
            summary.processed_count, summary.error_count, summary.skipped_count,
        )
        return summary

    def _process(self, reminder) -> ReminderOutcome:
        outcome = ReminderOutcome(reminder_id=reminder.pk, status=ReminderOutcome.FAILED, channel=reminder.channel)

        try:
            dispatched = dispatch_reminder(reminder, self.sender)
            outcome.site_name = dispatched.site_name
            outcome.recipient = dispatched.recipient
            outcome.message_id = dispatched.message_id

            if not dispatched.delivered:
                logger.warning("Failed to send email for reminder %s: %s", reminder.pk, dispatched.error)
                outcome.error = "Failed to send email"
                outcome.details = dispatched.error
                return outcome

            transition = apply_dispatch_outcome(self.repository, reminder, dispatched)

        except ReminderNotFound:
            logger.info("Reminder %s disappeared during the scan, skipping", reminder.pk)
            outcome.status = ReminderOutcome.SKIPPED
            outcome.error = "Reminder not found"
            return outcome

        except StoreUnavailable:
            raise

        except Exception as exc:  # noqa: BLE001 - isolate one reminder's failure
            logger.exception("Error processing reminder %s", reminder.pk)
            outcome.error = "Processing failed"
            outcome.details = str(exc)
            return outcome

        outcome.status = ReminderOutcome.COMPLETED
        outcome.email_sent = transition.reminder.email_sent
        if transition.successor is not None:
            outcome.successor_id = transition.successor.pk
        if transition.recurrence_error:
            outcome.details = transition.recurrence_error
        return outcome


def run_guarded_scan(scanner=None, now=None):
    """
    Run one scan unless another is in flight.

    Returns the ``ScanSummary``, or ``None`` when the call was dropped.
    """
    scanner = scanner or ReminderScanner()
    ran, summary = scan_guard.run(scanner.scan, now)
    return summary if ran else None
