"""
reminders/services/mailer.py

Outbound email for site reminders.

The engine only looks at ``SendResult.ok``; timeouts and retries belong
to the configured Django email backend (``EMAIL_TIMEOUT`` for SMTP).
"""

import logging
from dataclasses import dataclass
from email.utils import make_msgid
from typing import Optional, Protocol

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone
from django.utils.html import format_html, linebreaks
from django.utils.safestring import mark_safe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    ok: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailSender(Protocol):
    def send(self, to, subject, text_body, html_body=None) -> SendResult:
        ...


class DjangoEmailSender:
    """Sends through Django's mail framework (``EMAIL_BACKEND``)."""

    def __init__(self, from_email=None, connection=None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.connection = connection

    def send(self, to, subject, text_body, html_body=None) -> SendResult:
        message_id = make_msgid(domain="cleantabs.app")

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=self.from_email,
            to=[to],
            headers={"Message-ID": message_id},
            connection=self.connection,
        )
        if html_body:
            message.attach_alternative(html_body, "text/html")

        try:
            sent = message.send(fail_silently=False)
        except Exception as exc:  # noqa: BLE001 - any backend failure is a failed send
            logger.warning("Email to %s failed: %s", to, exc)
            return SendResult(ok=False, error=str(exc) or exc.__class__.__name__)

        if not sent:
            logger.warning("Email backend accepted no message for %s", to)
            return SendResult(ok=False, error="Email backend accepted no message")

        logger.info("Email sent to %s (%s)", to, message_id)
        return SendResult(ok=True, message_id=message_id)


# ============================================================
# SITE REMINDER CONTENT
# ============================================================

def compose_site_reminder(reminder, target):
    """
    Build ``(subject, text_body, html_body)`` for a due site reminder.
    """
    note = reminder.description or reminder.title
    scheduled = timezone.localtime(reminder.due_at)
    dashboard_url = getattr(settings, "REMINDER_DASHBOARD_URL", "")

    subject = f"Reminder: Time to check {target.site_name}"

    text_body = (
        f"Hello {target.recipient_name},\n\n"
        f"This is your reminder to revisit \"{target.site_name}\".\n\n"
        f"Site: {target.site_name}\n"
        f"URL: {target.site_url}\n"
        f"Scheduled for: {scheduled:%A, %d %B %Y %H:%M}\n\n"
        f"{note}\n\n"
        f"Manage your reminders in your dashboard: {dashboard_url}\n\n"
        f"The CleanTabs team"
    )

    html_body = format_html(
        "<div style=\"font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;\">"
        "<h2 style=\"color: #1e293b;\">{}</h2>"
        "<p>Hello {},</p>"
        "<p><strong>Site:</strong> {}<br>"
        "<strong>URL:</strong> <a href=\"{}\">{}</a><br>"
        "<strong>Scheduled:</strong> {}</p>"
        "<div>{}</div>"
        "<p><a href=\"{}\">Visit {} now</a></p>"
        "<p style=\"color: #94a3b8; font-size: 12px;\">"
        "Manage your reminders in your <a href=\"{}\">dashboard</a>.</p>"
        "</div>",
        reminder.title,
        target.recipient_name,
        target.site_name,
        target.site_url,
        target.site_url,
        f"{scheduled:%A, %d %B %Y %H:%M}",
        mark_safe(linebreaks(note, autoescape=True)),
        target.site_url,
        target.site_name,
        dashboard_url,
    )

    return subject, text_body, html_body
