"""
URL configuration for notifications API.

Routes:
    Inbox:
        /                     - List (GET) / create (POST)
        /unread-count/        - Unread count (GET)
        /{id}/read/           - Mark one as read (POST)
        /read/                - Mark notification_ids as read (POST)
        /read-all/            - Mark all as read (POST)
        /delete/              - Delete notification_ids (POST)

    SMS:
        /sms/                 - Send SMS batch (POST)
        /sms/logs/            - SMS delivery history (GET)

    Events:
        /dispatch/            - Dispatch any event (POST)
        /trigger-attendance/  - Attendance events (POST)
"""

from django.urls import path

from rest_framework.routers import DefaultRouter

from notifications.views import (
    DispatchView,
    NotificationViewSet,
    SmsLogView,
    SmsSendView,
    TriggerAttendanceView,
)

router = DefaultRouter()
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = [
    path("sms/", SmsSendView.as_view(), name="sms-send"),
    path("sms/logs/", SmsLogView.as_view(), name="sms-logs"),
    path("dispatch/", DispatchView.as_view(), name="dispatch"),
    path("trigger-attendance/", TriggerAttendanceView.as_view(), name="trigger-attendance"),
] + router.urls
