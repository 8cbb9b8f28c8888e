"""
reminders/services/repository.py

The reminder store as the scan engine sees it.

Every method talks to the database through the Django ORM and turns
``DatabaseError`` into ``StoreUnavailable`` so callers deal with one
failure type for "the store is down".
"""

import logging

from django.db import DatabaseError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from reminders.exceptions import ReminderNotFound, StoreUnavailable
from reminders.models import Reminder

logger = logging.getLogger(__name__)


class ReminderRepository:
    """Django ORM backed reminder store."""

    # =====================================================
    # SELECTION
    # =====================================================
    def find_due(self, now):
        """
        All reminders with ``due_at <= now`` that are not completed.

        The queryset is evaluated once, so the returned list is the
        snapshot a scan walks; each reminder appears in it exactly once.
        """
        try:
            return list(
                Reminder.objects
                .due(now)
                .select_related("site", "owner")
                .order_by("due_at", "pk")
            )
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not select due reminders: {exc}") from exc

    def count(self, predicate=None):
        try:
            qs = Reminder.objects.all()
            if predicate is not None:
                qs = qs.filter(predicate)
            return qs.count()
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not count reminders: {exc}") from exc

    def group_by_stats(self):
        """Row counts grouped by ``(channel, completed, email_sent)``."""
        try:
            return list(
                Reminder.objects
                .order_by()
                .values("channel", "completed", "email_sent")
                .annotate(count=Count("id"))
                .order_by("channel", "completed", "email_sent")
            )
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not group reminders: {exc}") from exc

    # =====================================================
    # WRITES
    # =====================================================
    def create(self, **fields):
        try:
            return Reminder.objects.create(**fields)
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not create reminder: {exc}") from exc

    def update(self, reminder_id, **patch):
        """
        Apply ``patch`` to one reminder under a row lock and stamp
        ``updated_at``. Raises ``ReminderNotFound`` if the row is gone.
        """
        try:
            with transaction.atomic():
                reminder = self._lock(reminder_id)

                if reminder.email_sent and patch.get("email_sent") is False:
                    raise ValueError(
                        f"email_sent cannot be cleared on reminder {reminder_id}"
                    )

                for field, value in patch.items():
                    setattr(reminder, field, value)
                reminder.updated_at = timezone.now()
                reminder.save(update_fields=[*patch, "updated_at"])
                return reminder
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not update reminder {reminder_id}: {exc}") from exc

    def complete(self, reminder_id, *, email_sent=False, successor=None):
        """
        Mark a reminder completed (and its email sent, when it was) and
        create its successor occurrence, all in one transaction.

        Returns ``(reminder, successor_or_None)``. A reminder that was
        deleted or completed by another writer raises ``ReminderNotFound``.
        """
        try:
            with transaction.atomic():
                reminder = self._lock(reminder_id)
                if reminder.completed:
                    raise ReminderNotFound(reminder_id)

                fields = ["completed", "updated_at"]
                reminder.completed = True
                if email_sent:
                    reminder.email_sent = True
                    fields.append("email_sent")
                reminder.updated_at = timezone.now()
                reminder.save(update_fields=fields)

                created = None
                if successor is not None:
                    created = Reminder.objects.create(**successor)
                return reminder, created
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not complete reminder {reminder_id}: {exc}") from exc

    def delete_where(self, predicate):
        """Delete every reminder matching ``predicate``; returns the count."""
        try:
            _, per_model = Reminder.objects.filter(predicate).delete()
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not delete reminders: {exc}") from exc
        return per_model.get(Reminder._meta.label, 0)

    # =====================================================
    # INTERNALS
    # =====================================================
    def _lock(self, reminder_id):
        reminder = (
            Reminder.objects
            .select_for_update()
            .filter(pk=reminder_id)
            .first()
        )
        if reminder is None:
            raise ReminderNotFound(reminder_id)
        return reminder


def due_predicate(now):
    return Q(due_at__lte=now, completed=False)


def upcoming_predicate(now):
    return Q(due_at__gt=now, completed=False)
