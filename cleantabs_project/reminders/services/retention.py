import logging
from datetime import timedelta

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from .repository import ReminderRepository

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


def retention_days():
    return int(getattr(settings, "REMINDER_RETENTION_DAYS", DEFAULT_RETENTION_DAYS))


def purge_completed_reminders(repository=None, now=None, days=None):
    """
    Delete reminders completed longer than the retention window ago.

    Idempotent; returns the number of rows deleted (0 when nothing
    qualifies). ``StoreUnavailable`` propagates.
    """
    repository = repository or ReminderRepository()
    now = now or timezone.now()
    days = retention_days() if days is None else days

    cutoff = now - timedelta(days=days)
    deleted = repository.delete_where(Q(completed=True, updated_at__lt=cutoff))

    logger.info(
        "Retention sweep removed %s completed reminders older than %s days",
        deleted, days,
    )
    return deleted
