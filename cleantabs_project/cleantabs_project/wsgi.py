"""
WSGI config for cleantabs_project.

Run a single worker per deployment when ENABLE_SCHEDULER is on, or keep it
off here and run ``manage.py run_reminder_scheduler`` as its own process.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cleantabs_project.settings")

application = get_wsgi_application()
