from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.db.models import Q

from reminders.exceptions import ReminderNotFound, StoreUnavailable
from reminders.models import Reminder, ReminderQuerySet
from reminders.services import ReminderRepository

pytestmark = pytest.mark.django_db


@pytest.fixture
def repository():
    return ReminderRepository()


def test_find_due_returns_only_past_incomplete_reminders(repository, make_reminder, now):
    past = make_reminder(due_at=now - timedelta(minutes=5))
    exactly_now = make_reminder(due_at=now)
    make_reminder(due_at=now + timedelta(minutes=1))
    make_reminder(due_at=now - timedelta(days=1), completed=True)

    due = repository.find_due(now)

    assert [r.pk for r in due] == [past.pk, exactly_now.pk]


def test_find_due_lists_each_reminder_once(repository, make_reminder, now):
    for minutes in range(5):
        make_reminder(due_at=now - timedelta(minutes=minutes))

    ids = [r.pk for r in repository.find_due(now)]

    assert len(ids) == len(set(ids)) == 5


def test_find_due_includes_emailed_but_incomplete(repository, make_reminder, now):
    stuck = make_reminder(email_sent=True)

    assert [r.pk for r in repository.find_due(now)] == [stuck.pk]


def test_find_due_wraps_database_errors(repository, now):
    with mock.patch.object(ReminderQuerySet, "due", side_effect=DatabaseError("gone")):
        with pytest.raises(StoreUnavailable):
            repository.find_due(now)


def test_update_stamps_updated_at(repository, make_reminder, now):
    reminder = make_reminder(updated_at=now - timedelta(days=3))

    updated = repository.update(reminder.pk, title="Renamed")

    reminder.refresh_from_db()
    assert reminder.title == "Renamed"
    assert reminder.updated_at > now - timedelta(days=3)
    assert updated.updated_at == reminder.updated_at


def test_update_missing_reminder_raises_not_found(repository):
    with pytest.raises(ReminderNotFound):
        repository.update(999999, completed=True)


def test_update_refuses_to_clear_email_sent(repository, make_reminder):
    reminder = make_reminder(email_sent=True)

    with pytest.raises(ValueError):
        repository.update(reminder.pk, email_sent=False)

    reminder.refresh_from_db()
    assert reminder.email_sent is True


def test_complete_sets_both_flags_and_creates_successor(repository, make_reminder, now):
    reminder = make_reminder()
    successor_fields = {
        "owner_id": reminder.owner_id,
        "site_id": reminder.site_id,
        "title": reminder.title,
        "due_at": now + timedelta(days=1),
    }

    completed, successor = repository.complete(
        reminder.pk, email_sent=True, successor=successor_fields,
    )

    assert completed.completed is True
    assert completed.email_sent is True
    assert successor.pk != reminder.pk
    assert successor.completed is False
    assert Reminder.objects.count() == 2


def test_complete_twice_is_not_found(repository, make_reminder):
    reminder = make_reminder(channel=Reminder.Channel.NOTIFICATION)
    repository.complete(reminder.pk)

    with pytest.raises(ReminderNotFound):
        repository.complete(reminder.pk)


def test_delete_where_returns_count(repository, make_reminder):
    make_reminder(completed=True)
    make_reminder(completed=True)
    keep = make_reminder()

    assert repository.delete_where(Q(completed=True)) == 2
    assert list(Reminder.objects.values_list("pk", flat=True)) == [keep.pk]


def test_delete_where_nothing_matches(repository, make_reminder):
    make_reminder()

    assert repository.delete_where(Q(completed=True)) == 0


def test_group_by_stats(repository, make_reminder):
    make_reminder(channel=Reminder.Channel.EMAIL)
    make_reminder(channel=Reminder.Channel.EMAIL)
    make_reminder(channel=Reminder.Channel.EMAIL, completed=True, email_sent=True)
    make_reminder(channel=Reminder.Channel.NOTIFICATION)

    rows = {
        (row["channel"], row["completed"], row["email_sent"]): row["count"]
        for row in repository.group_by_stats()
    }

    assert rows == {
        ("EMAIL", False, False): 2,
        ("EMAIL", True, True): 1,
        ("NOTIFICATION", False, False): 1,
    }
