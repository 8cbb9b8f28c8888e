"""
reminders/signals.py

Guards on Reminder writes that hold regardless of who saves the row
(engine, admin, shell).
"""

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from reminders.models import Reminder

logger = logging.getLogger(__name__)


# ============================================================
# PRE_SAVE: EMAIL_SENT NEVER GOES BACK TO FALSE
# ============================================================

@receiver(pre_save, sender=Reminder)
def keep_email_sent_monotonic(sender, instance, **kwargs):
    """
    Once a reminder's email went out, the flag stays set.
    A save that would clear it keeps the stored value instead.
    """
    if not instance.pk or instance.email_sent:
        return

    try:
        was_sent = (
            Reminder.objects
            .filter(pk=instance.pk)
            .values_list("email_sent", flat=True)
            .get()
        )
    except Reminder.DoesNotExist:
        return

    if was_sent:
        logger.warning("Refusing to clear email_sent on reminder %s", instance.pk)
        instance.email_sent = True
