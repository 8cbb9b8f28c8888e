from unittest import mock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from reminders import scheduler
from reminders.exceptions import StoreUnavailable


@pytest.fixture(autouse=True)
def reset_scheduler():
    scheduler._scheduler = None
    yield
    scheduler._scheduler = None


@pytest.fixture
def no_connection_churn():
    with mock.patch("reminders.scheduler.close_old_connections") as close:
        yield close


def _cron_field(trigger, name):
    return str(next(f for f in trigger.fields if f.name == name))


def test_disabled_scheduler_does_not_start(settings):
    settings.ENABLE_SCHEDULER = False

    assert scheduler.start_scheduler() is None


def test_register_jobs(settings):
    settings.REMINDER_SCAN_INTERVAL_SECONDS = 60
    background = BackgroundScheduler(timezone="UTC")

    scheduler.register_jobs(background)

    scan = background.get_job(scheduler.SCAN_JOB_ID)
    assert isinstance(scan.trigger, IntervalTrigger)
    assert scan.trigger.interval.total_seconds() == 60
    assert scan.coalesce is True

    sweep = background.get_job(scheduler.RETENTION_JOB_ID)
    assert isinstance(sweep.trigger, CronTrigger)
    assert _cron_field(sweep.trigger, "day_of_week") == "sun"
    assert _cron_field(sweep.trigger, "hour") == "2"
    assert _cron_field(sweep.trigger, "minute") == "0"
    assert sweep.max_instances == 1


def test_start_is_idempotent_and_shutdown_resets(settings):
    settings.ENABLE_SCHEDULER = True

    with mock.patch("reminders.scheduler.BackgroundScheduler") as factory:
        first = scheduler.start_scheduler()
        second = scheduler.start_scheduler()

        assert first is second
        factory.assert_called_once()
        first.start.assert_called_once()

        scheduler.shutdown_scheduler()

    first.shutdown.assert_called_once_with(wait=False)
    assert scheduler._scheduler is None


def test_scan_job_swallows_errors(no_connection_churn):
    with mock.patch(
        "reminders.scheduler.run_guarded_scan",
        side_effect=StoreUnavailable("database is down"),
    ):
        assert scheduler.run_reminder_scan() is None

    with mock.patch("reminders.scheduler.run_guarded_scan", side_effect=RuntimeError("boom")):
        assert scheduler.run_reminder_scan() is None

    assert no_connection_churn.call_count == 4


def test_scan_job_returns_summary(no_connection_churn):
    summary = object()
    with mock.patch("reminders.scheduler.run_guarded_scan", return_value=summary):
        assert scheduler.run_reminder_scan() is summary


def test_retention_job_swallows_errors(no_connection_churn):
    with mock.patch(
        "reminders.scheduler.purge_completed_reminders",
        side_effect=StoreUnavailable("database is down"),
    ):
        assert scheduler.run_retention_sweep() is None


def test_retention_job_returns_count(no_connection_churn):
    with mock.patch("reminders.scheduler.purge_completed_reminders", return_value=3):
        assert scheduler.run_retention_sweep() == 3
