"""
Reminder engine service layer.

Each module owns one step of a scan (selection, dispatch, state,
recurrence) or one side job (retention, stats). Schedulers, management
commands and views call into this package and nothing below it.
"""

# =====================================================
# SCAN
# =====================================================
from .engine import (
    ReminderOutcome,
    ReminderScanner,
    ScanSummary,
    run_guarded_scan,
)
from .guard import (
    SingleFlightGuard,
    scan_guard,
)

# =====================================================
# STORE / SENDERS
# =====================================================
from .repository import ReminderRepository
from .mailer import (
    DjangoEmailSender,
    SendResult,
    compose_site_reminder,
)

# =====================================================
# RECURRENCE
# =====================================================
from .recurrence import (
    advance,
    build_successor,
)

# =====================================================
# MAINTENANCE / INTROSPECTION
# =====================================================
from .retention import purge_completed_reminders
from .stats import (
    ReminderStats,
    collect_reminder_stats,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # Scan
    "ReminderOutcome",
    "ReminderScanner",
    "ScanSummary",
    "run_guarded_scan",
    "SingleFlightGuard",
    "scan_guard",

    # Store / senders
    "ReminderRepository",
    "DjangoEmailSender",
    "SendResult",
    "compose_site_reminder",

    # Recurrence
    "advance",
    "build_successor",

    # Maintenance / introspection
    "purge_completed_reminders",
    "ReminderStats",
    "collect_reminder_stats",
]
