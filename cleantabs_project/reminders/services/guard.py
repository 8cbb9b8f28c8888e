"""
reminders/services/guard.py

Single-flight execution: at most one run of a guarded operation at a
time in this process. A call that arrives while a run is in flight is
dropped, not queued.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class SingleFlightGuard:

    def __init__(self, name):
        self.name = name
        self._lock = threading.Lock()

    @property
    def in_flight(self):
        return self._lock.locked()

    def run(self, func, *args, **kwargs):
        """
        Call ``func`` unless another call is in flight.

        Returns ``(True, result)`` when it ran, ``(False, None)`` when the
        call was dropped. The guard is released even if ``func`` raises.
        """
        if not self._lock.acquire(blocking=False):
            # Contention is expected under slow scans; never a fault
            logger.debug("%s already in flight, dropping tick", self.name)
            return False, None

        try:
            return True, func(*args, **kwargs)
        finally:
            self._lock.release()


# Process-wide guard shared by the scheduler, commands and the manual trigger
scan_guard = SingleFlightGuard("reminder scan")
