from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Account that owns categories, sites and reminders.
    Reminder emails go to ``email`` and greet ``display_name``.
    """

    name = models.CharField(max_length=150, blank=True)

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username

    def __str__(self):
        return f"{self.display_name} ({self.username})" if self.name else self.username
