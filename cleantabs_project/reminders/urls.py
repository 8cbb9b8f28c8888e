from django.urls import path

from . import views

app_name = "reminders"

urlpatterns = [
    # SCHEDULER OPERATIONS (ADMIN TOKEN)
    path("scheduler/check/", views.trigger_reminder_scan, name="scheduler_check"),
    path("scheduler/stats/", views.reminder_stats, name="scheduler_stats"),

    # IN-APP
    path("reminders/due/", views.due_reminders, name="due_reminders"),
]
