"""
Notification system models.

This module defines the persisted side of notification delivery:
- NotificationType: Event types a notification can carry
- NotificationPriority: Display priority of an in-app notification
- Notification: In-app notification shown in a user's inbox
- SmsDeliveryLog: One row per attempted SMS, successful or not

Design Decisions:
    - Notification inherits from BaseModel (timestamps, ordering)
    - read_at is set if and only if is_read (enforced by a check constraint)
    - read_at records the first transition to read and is never moved
    - SmsDeliveryLog stores the normalized 10-digit phone so history
      lookups match regardless of how the number was entered

Usage:
    from notifications.models import Notification, NotificationType

    Notification.objects.create(
        user=parent,
        type=NotificationType.ABSENCE_ALERT,
        title="Absence Alert",
        message="Your child was marked absent today.",
        priority=NotificationPriority.HIGH,
    )

    unread = Notification.objects.filter(user=parent, is_read=False)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class NotificationType(models.TextChoices):
    """
    Event types.

    The first four are dispatchable school events; homework and
    report_card are only created directly as in-app notifications.
    """

    ABSENCE_ALERT = "absence_alert", "Absence Alert"
    WEEKLY_REPORT = "weekly_report", "Weekly Report"
    EMERGENCY = "emergency", "Emergency"
    GENERAL = "general", "General"
    HOMEWORK = "homework", "Homework"
    REPORT_CARD = "report_card", "Report Card"


class NotificationPriority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


class Notification(BaseModel):
    """
    In-app notification record for a user.

    Fields:
        user: Recipient (scopes all queries)
        type: NotificationType value
        title: Rendered title
        message: Rendered body
        priority: NotificationPriority value
        action_url: Dashboard path the notification links to
        data: Arbitrary JSON context (dates, student ids)
        is_read: Whether the recipient has read it
        read_at: When it was first marked read (None while unread)

    Inherits from BaseModel:
        created_at: Timestamp (auto, indexed)
        updated_at: Timestamp (auto)
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User receiving this notification",
    )

    type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
        db_index=True,
    )

    title = models.CharField(max_length=255)

    message = models.TextField()

    priority = models.CharField(
        max_length=10,
        choices=NotificationPriority.choices,
        default=NotificationPriority.MEDIUM,
    )

    action_url = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Dashboard path opened from the notification",
    )

    data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Arbitrary context data",
    )

    is_read = models.BooleanField(default=False, db_index=True)

    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at"]
        indexes = [
            # Primary query: user's unread notifications, newest first
            models.Index(
                fields=["user", "is_read", "-created_at"],
                name="notif_user_unread_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(is_read=True, read_at__isnull=False)
                    | models.Q(is_read=False, read_at__isnull=True)
                ),
                name="notif_read_at_matches_is_read",
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return f"Notification({self.type}) -> User {self.user_id} [{read_status}]"


class SmsDeliveryLog(BaseModel):
    """
    Outcome of a single SMS send attempt.

    Written by the SMS channel after each batch. Failed rows keep the
    error text; successful rows keep the provider's message id.
    """

    class Status(models.TextChoices):
        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"

    phone = models.CharField(
        max_length=32,
        db_index=True,
        help_text="Normalized 10-digit number, or the raw input if it could not be normalized",
    )
    event_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
    )
    message = models.TextField(blank=True, default="")
    provider = models.CharField(max_length=20)
    status = models.CharField(max_length=10, choices=Status.choices)
    provider_message_id = models.CharField(max_length=100, blank=True, default="")
    error = models.TextField(blank=True, default="")

    class Meta:
        db_table = "notifications_sms_delivery_log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["phone", "-created_at"],
                name="sms_log_phone_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"SMS({self.event_type}) -> {self.phone} [{self.status}]"
