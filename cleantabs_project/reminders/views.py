import logging

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from reminders.exceptions import StoreUnavailable
from reminders.models import Reminder
from reminders.services import collect_reminder_stats, run_guarded_scan

logger = logging.getLogger(__name__)


# ============================================================
# MANUAL SCAN (BEARER TOKEN, SEE SchedulerTokenMiddleware)
# ============================================================

@csrf_exempt
@require_POST
def trigger_reminder_scan(request):
    logger.info("Manual reminder check triggered via API")

    try:
        summary = run_guarded_scan()
    except StoreUnavailable as exc:
        logger.exception("Manual reminder check aborted")
        return JsonResponse(
            {
                "success": False,
                "error": "Reminder store unavailable",
                "details": str(exc),
            },
            status=503,
        )

    if summary is None:
        return JsonResponse(
            {
                "success": False,
                "error": "A reminder scan is already running",
            },
            status=409,
        )

    return JsonResponse(
        {
            "success": True,
            "message": "Manual reminder check completed",
            "result": summary.to_dict(),
            "stats": _stats_or_none(),
            "timestamp": timezone.now().isoformat(),
        }
    )


@require_GET
def reminder_stats(request):
    try:
        stats = collect_reminder_stats()
    except StoreUnavailable:
        logger.exception("Reminder stats unavailable")
        return JsonResponse(
            {"success": False, "error": "Reminder store unavailable"},
            status=503,
        )

    return JsonResponse(
        {
            "success": True,
            "stats": stats.to_dict(),
            "timestamp": timezone.now().isoformat(),
        }
    )


def _stats_or_none():
    try:
        return collect_reminder_stats().to_dict()
    except StoreUnavailable:
        logger.exception("Reminder stats unavailable after manual check")
        return None


# ============================================================
# IN-APP DELIVERY (SESSION USER)
# ============================================================

@login_required
@require_GET
def due_reminders(request):
    """
    The signed-in user's due, incomplete reminders that want an in-app
    notification. Independent of email delivery.
    """
    now = timezone.now()

    reminders = (
        Reminder.objects
        .due(now)
        .in_app()
        .filter(owner=request.user)
        .select_related("site")
        .order_by("due_at")
    )

    return JsonResponse(
        {
            "success": True,
            "reminders": [
                {
                    "id": r.pk,
                    "title": r.title,
                    "description": r.description,
                    "due_at": r.due_at.isoformat(),
                    "reminder_type": r.channel,
                    "site": {
                        "id": r.site_id,
                        "name": r.site.name,
                        "url": r.site.url,
                    },
                }
                for r in reminders
            ],
            "timestamp": now.isoformat(),
        }
    )
