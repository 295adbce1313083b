import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

NOTIFICATION_TYPES = [
    ("absence_alert", "Absence Alert"),
    ("weekly_report", "Weekly Report"),
    ("emergency", "Emergency"),
    ("general", "General"),
    ("homework", "Homework"),
    ("report_card", "Report Card"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("type", models.CharField(choices=NOTIFICATION_TYPES, db_index=True, default="general", max_length=30)),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                (
                    "priority",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("urgent", "Urgent")],
                        default="medium",
                        max_length=10,
                    ),
                ),
                ("action_url", models.CharField(blank=True, default="", help_text="Dashboard path opened from the notification", max_length=500)),
                ("data", models.JSONField(blank=True, default=dict, help_text="Arbitrary context data")),
                ("is_read", models.BooleanField(db_index=True, default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User receiving this notification",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "is_read", "-created_at"], name="notif_user_unread_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("is_read", True), ("read_at__isnull", False))
                            | models.Q(("is_read", False), ("read_at__isnull", True))
                        ),
                        name="notif_read_at_matches_is_read",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SmsDeliveryLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                (
                    "phone",
                    models.CharField(
                        db_index=True,
                        help_text="Normalized 10-digit number, or the raw input if it could not be normalized",
                        max_length=32,
                    ),
                ),
                ("event_type", models.CharField(choices=NOTIFICATION_TYPES, default="general", max_length=30)),
                ("message", models.TextField(blank=True, default="")),
                ("provider", models.CharField(max_length=20)),
                ("status", models.CharField(choices=[("sent", "Sent"), ("failed", "Failed")], max_length=10)),
                ("provider_message_id", models.CharField(blank=True, default="", max_length=100)),
                ("error", models.TextField(blank=True, default="")),
            ],
            options={
                "db_table": "notifications_sms_delivery_log",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["phone", "-created_at"], name="sms_log_phone_idx"),
                ],
            },
        ),
    ]
