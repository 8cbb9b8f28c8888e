from django.contrib import admin, messages
from django.utils.html import format_html

from .exceptions import StoreUnavailable
from .models import Reminder
from .services import run_guarded_scan


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    """
    Admin configuration for site reminders.
    Delivery state is read-only here; the scan engine owns it.
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_display = (
        "id",
        "owner",
        "site",
        "colored_title",
        "channel",
        "due_at",
        "completed",
        "email_sent",
        "is_recurring",
    )

    list_filter = (
        "channel",
        "completed",
        "email_sent",
        "is_recurring",
        "recurrence_kind",
        "due_at",
    )

    search_fields = (
        "title",
        "description",
        "owner__username",
        "owner__email",
        "site__name",
        "site__url",
    )

    list_select_related = ("owner", "site")
    ordering = ("-due_at",)
    list_per_page = 25

    # =====================================================
    # FIELDSETS (DETAIL VIEW)
    # =====================================================
    fieldsets = (
        ("Owner", {
            "fields": ("owner", "site"),
        }),
        ("Content", {
            "fields": ("title", "description"),
        }),
        ("Schedule", {
            "fields": ("due_at", "channel", "is_recurring", "recurrence_kind", "next_occurrence_at"),
        }),
        ("Delivery", {
            "fields": ("completed", "email_sent", "created_at", "updated_at"),
        }),
    )

    readonly_fields = (
        "completed",
        "email_sent",
        "created_at",
        "updated_at",
    )

    # =====================================================
    # ACTIONS
    # =====================================================
    actions = (
        "run_scan_now",
    )

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_title(self, obj):
        """
        Color the title by delivery state for fast scanning.
        """
        if obj.completed:
            color = "#16a34a"    # green
        elif obj.is_due():
            color = "#f59e0b"    # orange
        else:
            color = "#6b7280"    # gray

        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            color,
            obj.title,
        )

    colored_title.short_description = "Title"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Run a reminder scan now")
    def run_scan_now(self, request, queryset):
        try:
            summary = run_guarded_scan()
        except StoreUnavailable as exc:
            self.message_user(request, f"Reminder store unavailable: {exc}", messages.ERROR)
            return

        if summary is None:
            self.message_user(request, "A reminder scan is already running.", messages.WARNING)
            return

        self.message_user(
            request,
            f"Scan finished: {summary.processed_count} processed, "
            f"{summary.error_count} errors, {summary.skipped_count} skipped.",
            messages.SUCCESS,
        )
