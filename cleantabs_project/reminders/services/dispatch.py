"""
reminders/services/dispatch.py

Channel routing for a due reminder.

- EMAIL / BOTH: one email per scan while the reminder is due and unsent.
- NOTIFICATION / BOTH: nothing to send; the in-app surface lists due,
  incomplete reminders on its own.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .lookup import resolve_delivery_target
from .mailer import EmailSender, compose_site_reminder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    delivered: bool
    email_delivered: bool = False
    message_id: Optional[str] = None
    recipient: Optional[str] = None
    site_name: Optional[str] = None
    error: Optional[str] = None


def dispatch_reminder(reminder, sender: EmailSender) -> DispatchOutcome:
    target = resolve_delivery_target(reminder)

    if reminder.wants_in_app:
        logger.debug(
            "Reminder %s left for in-app delivery (%s)",
            reminder.pk, target.site_name,
        )

    # Already emailed by an earlier scan that did not get to complete it
    if not reminder.wants_email or reminder.email_sent:
        return DispatchOutcome(
            delivered=True,
            recipient=target.recipient_email,
            site_name=target.site_name,
        )

    if not target.recipient_email:
        return DispatchOutcome(
            delivered=False,
            site_name=target.site_name,
            error="Recipient has no email address",
        )

    subject, text_body, html_body = compose_site_reminder(reminder, target)

    logger.info(
        "Sending email reminder %s for %s to %s",
        reminder.pk, target.site_name, target.recipient_email,
    )
    result = sender.send(target.recipient_email, subject, text_body, html_body)

    return DispatchOutcome(
        delivered=result.ok,
        email_delivered=result.ok,
        message_id=result.message_id,
        recipient=target.recipient_email,
        site_name=target.site_name,
        error=None if result.ok else (result.error or "Failed to send email"),
    )
