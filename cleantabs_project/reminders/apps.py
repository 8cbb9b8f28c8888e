from django.apps import AppConfig
import os
import sys


class RemindersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reminders"
    verbose_name = "Reminders"

    def ready(self):
        # --------------------------------------------------
        # Load signals (REQUIRED)
        # --------------------------------------------------
        import reminders.signals  # noqa

        # --------------------------------------------------
        # Start APScheduler SAFELY
        # --------------------------------------------------
        if not _should_start_scheduler(sys.argv, os.environ):
            return

        from .scheduler import start_scheduler
        start_scheduler()


def _should_start_scheduler(argv, environ):
    """
    WSGI processes and runserver start the in-process scheduler.
    Other manage.py commands (migrate, check_reminders,
    run_reminder_scheduler...) never do.
    """
    if os.path.basename(argv[0]) != "manage.py":
        return True

    if argv[1:2] != ["runserver"]:
        return False

    # The autoreloader parent runs ready() too, whatever DEBUG says;
    # only the child that serves requests may start a scheduler
    return "--noreload" in argv or environ.get("RUN_MAIN") == "true"
