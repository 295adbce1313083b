"""
Django app configuration for parent notifications.
"""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """In-app inbox, SMS delivery and event dispatch."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Parent Notifications"
