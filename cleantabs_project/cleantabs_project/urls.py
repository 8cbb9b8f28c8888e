from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({"status": "ok", "service": "cleantabs"})


urlpatterns = [
    # HEALTH
    path("", health, name="health"),

    # DJANGO ADMIN (STAFF ONLY)
    path("admin/", admin.site.urls),

    # REMINDER ENGINE (SCHEDULER + IN-APP)
    path("api/", include("reminders.urls")),
]
