from datetime import timedelta

import pytest
from django.utils import timezone

from accounts.models import User
from bookmarks.models import Category, Site, Subcategory
from reminders.models import Reminder
from reminders.services import SendResult


class FakeSender:
    """Records every send; fails while ``fail`` is set."""

    def __init__(self, fail=False, error="SMTP connection refused"):
        self.fail = fail
        self.error = error
        self.calls = []

    def send(self, to, subject, text_body, html_body=None):
        self.calls.append(
            {"to": to, "subject": subject, "text": text_body, "html": html_body}
        )
        if self.fail:
            return SendResult(ok=False, error=self.error)
        return SendResult(ok=True, message_id=f"<fake-{len(self.calls)}@test>")


@pytest.fixture
def now():
    return timezone.now().replace(microsecond=0)


@pytest.fixture
def owner(db):
    return User.objects.create_user(
        username="umit",
        email="umit@example.com",
        password="secret-pass",
        name="Umit",
    )


@pytest.fixture
def site(owner):
    category = Category.objects.create(owner=owner, name="Work")
    subcategory = Subcategory.objects.create(category=category, name="Docs")
    return Site.objects.create(
        subcategory=subcategory,
        name="Django Docs",
        url="https://docs.djangoproject.com/",
    )


@pytest.fixture
def make_reminder(owner, site, now):
    def _make(**overrides):
        fields = {
            "owner": owner,
            "site": site,
            "title": "Read the release notes",
            "description": "",
            "due_at": now - timedelta(minutes=1),
            "channel": Reminder.Channel.EMAIL,
        }
        fields.update(overrides)
        return Reminder.objects.create(**fields)

    return _make


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def failing_sender():
    return FakeSender(fail=True)
