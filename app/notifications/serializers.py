"""
Serializers for notification API.

This module provides DRF serializers for the notification endpoints.

Serializers:
    NotificationSerializer: Read-only notification details
    NotificationListQuerySerializer: ?unread_only=&limit= for the inbox
    NotificationIdsSerializer: Body for read/ and delete/
    NotificationCreateSerializer: Body for creating in-app notifications
    UnreadCountSerializer / CountResponseSerializer: Count responses
    SmsSendSerializer: Body for a direct SMS batch
    SmsDeliveryLogSerializer / SmsLogQuerySerializer: SMS history
    DispatchSerializer: Body for dispatching any event
    TriggerAttendanceSerializer: Body for attendance-only triggers

Usage:
    from notifications.serializers import NotificationSerializer

    serializer = NotificationSerializer(notifications, many=True)
    data = serializer.data
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from notifications.models import (
    Notification,
    NotificationPriority,
    NotificationType,
    SmsDeliveryLog,
)
from notifications.orchestrator import ATTENDANCE_TYPES, DISPATCHABLE_TYPES, NotificationEvent
from notifications.services import DEFAULT_LIST_LIMIT

MAX_LIST_LIMIT = 200


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    Usage:
        serializer = NotificationSerializer(notification)
        serializer = NotificationSerializer(notifications, many=True)
    """

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "priority",
            "action_url",
            "data",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields


class NotificationListQuerySerializer(serializers.Serializer):
    unread_only = serializers.BooleanField(required=False, default=False)
    limit = serializers.IntegerField(
        required=False,
        default=DEFAULT_LIST_LIMIT,
        min_value=1,
        max_value=MAX_LIST_LIMIT,
    )


class NotificationIdsSerializer(serializers.Serializer):
    """
    Body for bulk read/delete.

    Fields:
        notification_ids: Ids of the caller's notifications
    """

    notification_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )


class NotificationCreateSerializer(serializers.Serializer):
    """
    Body for creating in-app notifications for a list of users.

    Example:
        {
            "user_ids": [4, 9],
            "type": "homework",
            "title": "New homework",
            "message": "Maths worksheet due Friday",
            "priority": "medium",
            "action_url": "/dashboard/assignments"
        }
    """

    user_ids = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.all(),
        many=True,
        allow_empty=False,
    )
    type = serializers.ChoiceField(
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
    )
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    priority = serializers.ChoiceField(
        choices=NotificationPriority.choices,
        default=NotificationPriority.MEDIUM,
    )
    action_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    data = serializers.JSONField(required=False, default=dict)

    def validate_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Must be a JSON object.")
        return value


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class CountResponseSerializer(serializers.Serializer):
    """
    Response for bulk mutations.

    Fields:
        success: Always true on 200
        count: Rows affected by this call
    """

    success = serializers.BooleanField()
    count = serializers.IntegerField()


# ============================================================================
# SMS Serializers
# ============================================================================


class SmsRecipientSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=32)
    name = serializers.CharField(max_length=255, required=False, default="Parent")
    student_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class SmsSendSerializer(serializers.Serializer):
    """
    Body for a direct SMS batch.

    Unknown types are accepted and use the general template.

    Example:
        {
            "type": "absence_alert",
            "recipients": [{"phone": "9876543210", "name": "Parent", "student_name": "Asha"}],
            "data": {"school_name": "Greenfield"}
        }
    """

    type = serializers.CharField(max_length=30, required=False, default=NotificationType.GENERAL)
    recipients = SmsRecipientSerializer(many=True, allow_empty=False)
    message = serializers.CharField(required=False, allow_blank=True, default="")
    data = serializers.DictField(required=False, default=dict)


class SmsDeliveryLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = SmsDeliveryLog
        fields = [
            "id",
            "phone",
            "event_type",
            "message",
            "provider",
            "status",
            "provider_message_id",
            "error",
            "created_at",
        ]
        read_only_fields = fields


class SmsLogQuerySerializer(serializers.Serializer):
    phone = serializers.CharField(required=False, allow_blank=True)
    type = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(
        required=False,
        default=DEFAULT_LIST_LIMIT,
        min_value=1,
        max_value=MAX_LIST_LIMIT,
    )


# ============================================================================
# Dispatch Serializers
# ============================================================================


class DispatchSerializer(serializers.Serializer):
    """
    Body for dispatching a notification event.

    Example:
        {"type": "absence_alert", "school_id": 3, "class_name": "7", "section": "B"}
    """

    event_types = DISPATCHABLE_TYPES

    type = serializers.CharField(max_length=30)
    school_id = serializers.IntegerField(min_value=1)
    class_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
    section = serializers.CharField(max_length=20, required=False, allow_blank=True)
    date = serializers.DateField(required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True)
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    sms_cap = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    data = serializers.DictField(required=False, default=dict)

    def validate_type(self, value):
        if value not in self.event_types:
            raise serializers.ValidationError("Invalid notification type")
        return value

    def to_event(self) -> NotificationEvent:
        data = self.validated_data
        return NotificationEvent(
            event_type=data["type"],
            school_id=data["school_id"],
            class_name=data.get("class_name") or None,
            section=data.get("section") or None,
            date=data.get("date"),
            message=data.get("message") or None,
            title=data.get("title") or None,
            sms_cap=data.get("sms_cap"),
            data=data.get("data") or {},
        )


class TriggerAttendanceSerializer(DispatchSerializer):
    """Attendance triggers accept absence_alert and weekly_report only."""

    event_types = ATTENDANCE_TYPES
