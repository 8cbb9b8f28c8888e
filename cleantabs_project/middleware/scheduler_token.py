import hmac
import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


class SchedulerTokenMiddleware:
    """
    Bearer-token gate for the operational reminder endpoints.

    Requests under a protected prefix need
    ``Authorization: Bearer <REMINDER_ADMIN_SECRET>``. With no secret
    configured every such request is rejected.
    """

    PROTECTED_PREFIXES = (
        "/api/scheduler/",
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path

        # Everything else is handled by normal auth
        if not path.startswith(self.PROTECTED_PREFIXES):
            return self.get_response(request)

        if not self._authorized(request):
            logger.warning("Rejected unauthorized scheduler request to %s", path)
            return JsonResponse(
                {"success": False, "error": "Unauthorized"},
                status=401,
            )

        return self.get_response(request)

    def _authorized(self, request):
        secret = getattr(settings, "REMINDER_ADMIN_SECRET", "")
        if not secret:
            return False

        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return False

        return hmac.compare_digest(token.encode(), secret.encode())
