import threading

import pytest

from reminders.exceptions import StoreUnavailable
from reminders.services import ReminderScanner, SingleFlightGuard, run_guarded_scan, scan_guard


class BlockingRepository:
    """find_due parks until released, so a scan stays in flight."""

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()
        self.find_due_calls = 0

    def find_due(self, now):
        self.find_due_calls += 1
        self.entered.set()
        self.release.wait(timeout=5)
        return []


class BrokenRepository:
    def find_due(self, now):
        raise StoreUnavailable("database is down")


def test_run_returns_result():
    guard = SingleFlightGuard("test")

    assert guard.run(lambda x: x * 2, 21) == (True, 42)
    assert guard.in_flight is False


def test_call_while_in_flight_is_dropped():
    guard = SingleFlightGuard("test")
    calls = []

    def outer():
        return guard.run(calls.append, "inner")

    ran, inner = guard.run(outer)

    assert ran is True
    assert inner == (False, None)
    assert calls == []


def test_guard_released_after_exception():
    guard = SingleFlightGuard("test")

    def boom():
        raise RuntimeError("scan failed")

    with pytest.raises(RuntimeError):
        guard.run(boom)

    assert guard.in_flight is False
    assert guard.run(lambda: "again") == (True, "again")


def test_contention_is_not_logged_as_a_fault(caplog):
    guard = SingleFlightGuard("test")

    with caplog.at_level("DEBUG", logger="reminders"):
        guard.run(lambda: guard.run(lambda: None))

    assert not [r for r in caplog.records if r.levelname in ("WARNING", "ERROR", "CRITICAL")]


def test_tick_during_scan_makes_no_store_or_sender_calls(sender):
    repository = BlockingRepository()
    scanner = ReminderScanner(repository=repository, sender=sender)
    results = {}

    first = threading.Thread(target=lambda: results.setdefault("first", run_guarded_scan(scanner)))
    first.start()
    try:
        assert repository.entered.wait(timeout=5)

        second = run_guarded_scan(scanner)

        assert second is None
        assert repository.find_due_calls == 1
        assert sender.calls == []
    finally:
        repository.release.set()
        first.join(timeout=5)

    assert results["first"] is not None
    assert results["first"].outcomes == []
    assert scan_guard.in_flight is False


def test_guard_released_when_store_is_unavailable(sender):
    scanner = ReminderScanner(repository=BrokenRepository(), sender=sender)

    with pytest.raises(StoreUnavailable):
        run_guarded_scan(scanner)

    assert scan_guard.in_flight is False
