from datetime import timedelta
from unittest import mock

import pytest
from django.core import mail

from reminders.exceptions import StoreUnavailable
from reminders.models import Reminder
from reminders.services import scan_guard

pytestmark = pytest.mark.django_db

SECRET = "s3cret-token"


@pytest.fixture
def secret(settings):
    settings.REMINDER_ADMIN_SECRET = SECRET
    return SECRET


@pytest.fixture
def auth():
    return {"HTTP_AUTHORIZATION": f"Bearer {SECRET}"}


# ============================================================
# TOKEN GATE
# ============================================================

def test_check_without_token_is_rejected(client, secret, make_reminder):
    make_reminder()

    response = client.post("/api/scheduler/check/")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert mail.outbox == []


def test_check_with_wrong_token_is_rejected(client, secret):
    response = client.post("/api/scheduler/check/", HTTP_AUTHORIZATION="Bearer nope")

    assert response.status_code == 401


def test_every_request_rejected_when_no_secret_configured(client, settings):
    settings.REMINDER_ADMIN_SECRET = ""

    response = client.get("/api/scheduler/stats/", HTTP_AUTHORIZATION="Bearer ")

    assert response.status_code == 401


# ============================================================
# MANUAL CHECK
# ============================================================

def test_manual_check_runs_a_scan(client, secret, auth, make_reminder):
    reminder = make_reminder(channel=Reminder.Channel.EMAIL)

    response = client.post("/api/scheduler/check/", **auth)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["result"]["processed_count"] == 1
    assert body["stats"]["due"] == 0
    assert "timestamp" in body
    assert len(mail.outbox) == 1
    reminder.refresh_from_db()
    assert reminder.completed is True


def test_manual_check_requires_post(client, secret, auth):
    response = client.get("/api/scheduler/check/", **auth)

    assert response.status_code == 405


def test_manual_check_while_scan_in_flight_is_a_conflict(client, secret, auth, make_reminder):
    make_reminder()

    assert scan_guard._lock.acquire(blocking=False)
    try:
        response = client.post("/api/scheduler/check/", **auth)
    finally:
        scan_guard._lock.release()

    assert response.status_code == 409
    assert response.json()["error"] == "A reminder scan is already running"
    assert mail.outbox == []


def test_manual_check_store_unavailable(client, secret, auth):
    with mock.patch(
        "reminders.views.run_guarded_scan",
        side_effect=StoreUnavailable("database is down"),
    ):
        response = client.post("/api/scheduler/check/", **auth)

    assert response.status_code == 503
    assert response.json()["success"] is False


# ============================================================
# STATS / IN-APP
# ============================================================

def test_stats_endpoint(client, secret, auth, make_reminder, now):
    make_reminder(channel=Reminder.Channel.NOTIFICATION)
    make_reminder(due_at=now + timedelta(days=2))

    response = client.get("/api/scheduler/stats/", **auth)

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["due"] == 1
    assert stats["upcoming"] == 1


def test_stats_endpoint_while_scan_in_flight(client, secret, auth, make_reminder, now):
    make_reminder(channel=Reminder.Channel.EMAIL)
    make_reminder(due_at=now + timedelta(days=2))

    assert scan_guard._lock.acquire(blocking=False)
    try:
        response = client.get("/api/scheduler/stats/", **auth)
    finally:
        scan_guard._lock.release()

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["due"] == 1
    assert stats["upcoming"] == 1
    assert mail.outbox == []


def test_due_reminders_for_signed_in_user(client, owner, make_reminder, now):
    notification = make_reminder(channel=Reminder.Channel.NOTIFICATION)
    both = make_reminder(channel=Reminder.Channel.BOTH, due_at=now - timedelta(minutes=5))
    make_reminder(channel=Reminder.Channel.EMAIL)
    make_reminder(channel=Reminder.Channel.NOTIFICATION, due_at=now + timedelta(hours=1))
    client.force_login(owner)

    response = client.get("/api/reminders/due/")

    assert response.status_code == 200
    payload = response.json()["reminders"]
    assert [r["id"] for r in payload] == [both.pk, notification.pk]
    assert payload[0]["site"]["url"] == "https://docs.djangoproject.com/"


def test_due_reminders_excludes_other_users(client, django_user_model, make_reminder):
    make_reminder(channel=Reminder.Channel.NOTIFICATION)
    stranger = django_user_model.objects.create_user(username="stranger", password="x")
    client.force_login(stranger)

    response = client.get("/api/reminders/due/")

    assert response.json()["reminders"] == []


def test_due_reminders_requires_login(client):
    response = client.get("/api/reminders/due/")

    assert response.status_code == 302
