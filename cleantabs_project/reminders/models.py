from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from bookmarks.models import Site


class ReminderQuerySet(models.QuerySet):

    def due(self, now=None):
        """Reminders whose due time has passed and that are not completed."""
        now = now or timezone.now()
        return self.filter(due_at__lte=now, completed=False)

    def upcoming(self, now=None):
        now = now or timezone.now()
        return self.filter(due_at__gt=now, completed=False)

    def in_app(self):
        return self.filter(
            channel__in=(Reminder.Channel.NOTIFICATION, Reminder.Channel.BOTH)
        )


class Reminder(models.Model):
    """
    A prompt to revisit a bookmarked site.

    Created by the user with ``completed=False`` and ``email_sent=False``;
    after that only the scan engine changes its delivery state.
    """

    # =====================================================
    # CHANNEL (WHICH DELIVERY MUST SUCCEED)
    # =====================================================
    class Channel(models.TextChoices):
        NOTIFICATION = "NOTIFICATION", "In-app notification"
        EMAIL = "EMAIL", "Email"
        BOTH = "BOTH", "Email and in-app notification"

    # =====================================================
    # RECURRENCE
    # =====================================================
    class Recurrence(models.TextChoices):
        DAILY = "DAILY", "Daily"
        WEEKLY = "WEEKLY", "Weekly"
        MONTHLY = "MONTHLY", "Monthly"

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reminders",
        help_text="User who receives this reminder"
    )

    site = models.ForeignKey(
        Site,
        on_delete=models.CASCADE,
        related_name="reminders",
        help_text="Bookmarked site the reminder points to"
    )

    # =====================================================
    # CONTENT
    # =====================================================
    title = models.CharField(max_length=200)

    description = models.TextField(blank=True)

    # =====================================================
    # SCHEDULING
    # =====================================================
    due_at = models.DateTimeField(db_index=True)

    channel = models.CharField(
        max_length=20,
        choices=Channel.choices,
        default=Channel.NOTIFICATION,
    )

    is_recurring = models.BooleanField(default=False)

    recurrence_kind = models.CharField(
        max_length=20,
        choices=Recurrence.choices,
        null=True,
        blank=True,
    )

    next_occurrence_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Seed for the next materialized occurrence"
    )

    # =====================================================
    # STATE
    # =====================================================
    completed = models.BooleanField(default=False, db_index=True)

    email_sent = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)

    # Stamped by the engine on every transition; drives retention
    updated_at = models.DateTimeField(default=timezone.now)

    objects = ReminderQuerySet.as_manager()

    # =====================================================
    # DJANGO META
    # =====================================================
    class Meta:
        ordering = ["due_at"]
        indexes = [
            models.Index(fields=["completed", "due_at"], name="reminder_completed_due_idx"),
            models.Index(fields=["completed", "updated_at"], name="reminder_completed_upd_idx"),
            models.Index(fields=["owner", "completed"], name="reminder_owner_completed_idx"),
        ]

    def __str__(self):
        return f"{self.title} @ {self.due_at:%Y-%m-%d %H:%M} ({self.channel})"

    # =====================================================
    # CHANNEL HELPERS
    # =====================================================
    @property
    def wants_email(self):
        return self.channel in (self.Channel.EMAIL, self.Channel.BOTH)

    @property
    def wants_in_app(self):
        return self.channel in (self.Channel.NOTIFICATION, self.Channel.BOTH)

    def is_due(self, now=None):
        now = now or timezone.now()
        return not self.completed and self.due_at <= now

    def clean(self):
        super().clean()
        if self.is_recurring:
            errors = {}
            if not self.recurrence_kind:
                errors["recurrence_kind"] = "Recurring reminders need a recurrence kind."
            if not self.next_occurrence_at:
                errors["next_occurrence_at"] = "Recurring reminders need a next occurrence."
            if errors:
                raise ValidationError(errors)
