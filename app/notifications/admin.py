"""
Django admin configuration for notification models.

Registers:
- Notification
- SmsDeliveryLog
"""

from django.contrib import admin

from notifications.models import Notification, SmsDeliveryLog


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Provides read-only view of notifications for debugging and support.
    """

    list_display = ["id", "type", "user", "title", "priority", "is_read", "created_at"]
    list_filter = ["is_read", "type", "priority", "created_at"]
    search_fields = ["title", "user__email"]
    ordering = ["-created_at"]
    raw_id_fields = ["user"]
    readonly_fields = [
        "user",
        "type",
        "title",
        "message",
        "priority",
        "action_url",
        "data",
        "read_at",
        "created_at",
        "updated_at",
    ]


@admin.register(SmsDeliveryLog)
class SmsDeliveryLogAdmin(admin.ModelAdmin):
    list_display = ["id", "phone", "event_type", "provider", "status", "created_at"]
    list_filter = ["status", "provider", "event_type"]
    search_fields = ["phone", "provider_message_id"]
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
