import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("bookmarks", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Reminder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("due_at", models.DateTimeField(db_index=True)),
                ("channel", models.CharField(choices=[("NOTIFICATION", "In-app notification"), ("EMAIL", "Email"), ("BOTH", "Email and in-app notification")], default="NOTIFICATION", max_length=20)),
                ("is_recurring", models.BooleanField(default=False)),
                ("recurrence_kind", models.CharField(blank=True, choices=[("DAILY", "Daily"), ("WEEKLY", "Weekly"), ("MONTHLY", "Monthly")], max_length=20, null=True)),
                ("next_occurrence_at", models.DateTimeField(blank=True, help_text="Seed for the next materialized occurrence", null=True)),
                ("completed", models.BooleanField(db_index=True, default=False)),
                ("email_sent", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("owner", models.ForeignKey(help_text="User who receives this reminder", on_delete=django.db.models.deletion.CASCADE, related_name="reminders", to=settings.AUTH_USER_MODEL)),
                ("site", models.ForeignKey(help_text="Bookmarked site the reminder points to", on_delete=django.db.models.deletion.CASCADE, related_name="reminders", to="bookmarks.site")),
            ],
            options={
                "ordering": ["due_at"],
                "indexes": [
                    models.Index(fields=["completed", "due_at"], name="reminder_completed_due_idx"),
                    models.Index(fields=["completed", "updated_at"], name="reminder_completed_upd_idx"),
                    models.Index(fields=["owner", "completed"], name="reminder_owner_completed_idx"),
                ],
            },
        ),
    ]
