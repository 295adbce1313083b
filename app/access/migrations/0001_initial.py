import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ModuleAccess",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("module_name", models.CharField(help_text="Module key, e.g. 'Attendance'", max_length=100)),
                (
                    "access_type",
                    models.CharField(
                        choices=[
                            ("none", "No Access"),
                            ("view", "View Only"),
                            ("edit", "Edit"),
                            ("delete", "Delete"),
                            ("all", "Full Access"),
                        ],
                        default="none",
                        max_length=10,
                    ),
                ),
                (
                    "sub_domain",
                    models.CharField(blank=True, help_text="Dashboard path, e.g. '/dashboard/attendance'", max_length=255, null=True),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="module_access",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "module access",
                "verbose_name_plural": "module access",
                "db_table": "access_module_access",
                "ordering": ["module_name"],
                "constraints": [
                    models.UniqueConstraint(fields=["user", "module_name"], name="unique_module_access_per_user"),
                ],
            },
        ),
    ]
