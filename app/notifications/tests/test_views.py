"""
Integration tests for notification API endpoints.

Test Classes:
    TestNotificationList: GET /api/v1/notifications/
    TestNotificationCreate: POST /api/v1/notifications/
    TestUnreadCount: GET /api/v1/notifications/unread-count/
    TestMarkRead: POST .../{id}/read/, .../read/, .../read-all/
    TestDeleteNotifications: POST .../delete/
    TestSmsSend: POST /api/v1/notifications/sms/
    TestSmsLogs: GET /api/v1/notifications/sms/logs/
    TestDispatch: POST /api/v1/notifications/dispatch/
    TestTriggerAttendance: POST /api/v1/notifications/trigger-attendance/
"""

import pytest
from django.db import DatabaseError
from django.urls import reverse, reverse_lazy
from freezegun import freeze_time

from authentication.tests.factories import ParentFactory
from core.exceptions import StorageError
from notifications.models import Notification, SmsDeliveryLog
from notifications.tests.factories import NotificationFactory, SmsDeliveryLogFactory
from schools.models import School
from schools.tests.factories import AttendanceFactory, StudentFactory


class TestNotificationList:
    url = reverse_lazy("notifications:notification-list")

    def test_returns_own_notifications_newest_first(self, parent_client, parent, other_user):
        with freeze_time("2024-03-01 09:00:00"):
            older = NotificationFactory(user=parent)
        with freeze_time("2024-03-02 09:00:00"):
            newer = NotificationFactory(user=parent)
        NotificationFactory(user=other_user)

        response = parent_client.get(self.url)

        assert response.status_code == 200
        assert [item["id"] for item in response.data] == [newer.id, older.id]

    def test_unread_only_and_limit(self, parent_client, parent):
        NotificationFactory.create_batch(3, user=parent)
        NotificationFactory(user=parent, read=True)

        response = parent_client.get(self.url, {"unread_only": "true", "limit": 2})

        assert response.status_code == 200
        assert len(response.data) == 2
        assert all(item["is_read"] is False for item in response.data)

    def test_rejects_out_of_range_limit(self, parent_client):
        assert parent_client.get(self.url, {"limit": 0}).status_code == 400

    def test_requires_authentication(self, api_client, db):
        assert api_client.get(self.url).status_code == 401


class TestNotificationCreate:
    url = reverse_lazy("notifications:notification-list")

    def test_creates_for_each_user(self, user_client, parent, other_user):
        response = user_client.post(
            self.url,
            {
                "user_ids": [parent.id, other_user.id],
                "type": "homework",
                "title": "New homework",
                "message": "Maths worksheet due Friday",
                "action_url": "/dashboard/assignments",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["success"] is True
        assert len(response.data["data"]) == 2
        assert Notification.objects.get(user=parent).type == "homework"

    def test_requires_messages_edit_access(self, parent_client, other_user):
        response = parent_client.post(
            self.url,
            {"user_ids": [other_user.id], "title": "Hi", "message": "Hello"},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["detail"] == "Not permitted"

    def test_unknown_user_is_rejected(self, user_client):
        response = user_client.post(
            self.url,
            {"user_ids": [999999], "title": "Hi", "message": "Hello"},
            format="json",
        )

        assert response.status_code == 400
        assert "user_ids" in response.data

    def test_storage_failure_is_503(self, user_client, parent, mocker):
        mocker.patch(
            "notifications.views.NotificationService.create_bulk",
            side_effect=StorageError("Could not create notifications", error_code="NOTIFICATION_WRITE_FAILED"),
        )

        response = user_client.post(
            self.url,
            {"user_ids": [parent.id], "title": "Hi", "message": "Hello"},
            format="json",
        )

        assert response.status_code == 503
        assert response.data == {
            "success": False,
            "error": "Could not create notifications",
            "error_code": "NOTIFICATION_WRITE_FAILED",
        }


class TestUnreadCount:
    url = reverse_lazy("notifications:notification-unread-count")

    def test_counts_own_unread(self, parent_client, parent, other_user):
        NotificationFactory.create_batch(2, user=parent)
        NotificationFactory(user=parent, read=True)
        NotificationFactory(user=other_user)

        response = parent_client.get(self.url)

        assert response.status_code == 200
        assert response.data == {"unread_count": 2}


class TestMarkRead:
    def test_mark_single_read(self, parent_client, parent):
        notification = NotificationFactory(user=parent)

        response = parent_client.post(reverse("notifications:notification-read", kwargs={"pk": notification.id}))

        assert response.status_code == 200
        assert response.data["is_read"] is True
        assert response.data["read_at"] is not None

    def test_mark_single_read_is_idempotent(self, parent_client, parent):
        notification = NotificationFactory(user=parent, read=True)
        original = notification.read_at
        url = reverse_lazy("notifications:notification-read", kwargs={"pk": notification.id})

        response = parent_client.post(url)

        assert response.status_code == 200
        notification.refresh_from_db()
        assert notification.read_at == original

    def test_other_users_notification_is_404(self, parent_client, other_user):
        notification = NotificationFactory(user=other_user)

        response = parent_client.post(reverse("notifications:notification-read", kwargs={"pk": notification.id}))

        assert response.status_code == 404

    def test_mark_many_read(self, parent_client, parent):
        first, second, third = NotificationFactory.create_batch(3, user=parent)

        response = parent_client.post(
            reverse("notifications:notification-read-many"),
            {"notification_ids": [first.id, second.id]},
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {"success": True, "count": 2}
        third.refresh_from_db()
        assert third.is_read is False

    def test_mark_many_requires_ids(self, parent_client):
        response = parent_client.post(
            reverse("notifications:notification-read-many"),
            {"notification_ids": []},
            format="json",
        )

        assert response.status_code == 400

    def test_mark_all_read(self, parent_client, parent):
        NotificationFactory.create_batch(3, user=parent)

        response = parent_client.post(reverse("notifications:notification-read-all"))

        assert response.status_code == 200
        assert response.data == {"success": True, "count": 3}
        assert not Notification.objects.filter(user=parent, is_read=False).exists()


class TestDeleteNotifications:
    url = reverse_lazy("notifications:notification-delete-many")

    def test_deletes_own_only(self, parent_client, parent, other_user):
        mine = NotificationFactory(user=parent)
        theirs = NotificationFactory(user=other_user)

        response = parent_client.post(
            self.url,
            {"notification_ids": [mine.id, theirs.id]},
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {"success": True, "count": 1}
        assert Notification.objects.filter(pk=theirs.pk).exists()


class TestSmsSend:
    url = reverse_lazy("notifications:sms-send")

    def test_sends_batch_with_per_recipient_results(self, faculty_client, use_fake_provider):
        response = faculty_client.post(
            self.url,
            {
                "type": "absence_alert",
                "recipients": [
                    {"phone": "+91 98000 00001", "student_name": "Asha"},
                    {"phone": "123"},
                ],
                "data": {"school_name": "Greenfield"},
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["success"] is True
        assert response.data["message"] == "Sent 1 SMS, 1 failed"
        assert response.data["summary"] == {"total": 2, "sent": 1, "failed": 1}
        assert response.data["results"][0]["recipient"] == "9800000001"
        assert response.data["results"][1]["success"] is False
        assert "at Greenfield" in use_fake_provider.sent[0][1]

    def test_unknown_type_uses_general_template(self, faculty_client, use_fake_provider, settings):
        settings.SMS_SIGNATURE = "School OS"

        response = faculty_client.post(
            self.url,
            {"type": "field_trip", "recipients": [{"phone": "9800000001"}], "data": {"school_name": "Greenfield"}},
            format="json",
        )

        assert response.status_code == 200
        assert use_fake_provider.sent[0][1] == "Notification from Greenfield. - School OS"

    def test_explicit_message(self, faculty_client, use_fake_provider):
        faculty_client.post(
            self.url,
            {"recipients": [{"phone": "9800000001"}], "message": "PTM on Saturday at 10"},
            format="json",
        )

        assert use_fake_provider.sent[0][1] == "PTM on Saturday at 10"

    def test_missing_provider_configuration_is_503(self, faculty_client, settings):
        settings.SMS_PROVIDER = "carrier-pigeon"

        response = faculty_client.post(self.url, {"recipients": [{"phone": "9800000001"}]}, format="json")

        assert response.status_code == 503
        assert response.data["error_code"] == "UNKNOWN_SMS_PROVIDER"

    def test_requires_recipients(self, faculty_client, use_fake_provider):
        response = faculty_client.post(self.url, {"recipients": []}, format="json")

        assert response.status_code == 400

    def test_parent_is_denied(self, parent_client, use_fake_provider):
        response = parent_client.post(self.url, {"recipients": [{"phone": "9800000001"}]}, format="json")

        assert response.status_code == 403
        assert use_fake_provider.sent == []


class TestSmsLogs:
    url = reverse_lazy("notifications:sms-logs")

    def test_filters_by_normalized_phone(self, faculty_client):
        SmsDeliveryLogFactory(phone="9800000001")
        SmsDeliveryLogFactory(phone="9800000002")

        response = faculty_client.get(self.url, {"phone": "+91 98000-00001"})

        assert response.status_code == 200
        assert response.data["count"] == 1
        assert response.data["logs"][0]["phone"] == "9800000001"

    def test_filters_by_type_and_limit(self, faculty_client):
        SmsDeliveryLogFactory.create_batch(3, event_type="weekly_report")
        SmsDeliveryLogFactory(event_type="absence_alert")

        response = faculty_client.get(self.url, {"type": "weekly_report", "limit": 2})

        assert response.data["count"] == 2
        assert {log["event_type"] for log in response.data["logs"]} == {"weekly_report"}

    def test_raw_phone_filter(self, faculty_client):
        SmsDeliveryLogFactory(phone="123", status=SmsDeliveryLog.Status.FAILED)

        response = faculty_client.get(self.url, {"phone": "123"})

        assert response.data["count"] == 1

    def test_parent_is_denied(self, parent_client):
        assert parent_client.get(self.url).status_code == 403


@freeze_time("2024-03-08 06:00:00")
class TestDispatch:
    url = reverse_lazy("notifications:dispatch")

    def test_absence_alert_summary(self, faculty_client, school, use_fake_provider):
        for student in (
            StudentFactory(school=school),
            StudentFactory(school=school),
            StudentFactory(school=school, parent_phone="", parent_user=ParentFactory()),
        ):
            AttendanceFactory(student=student, status="absent")

        response = faculty_client.post(
            self.url,
            {"type": "absence_alert", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 200
        data = response.data["data"]
        assert data["state"] == "aggregated"
        assert data["total_audience"] == 3
        assert data["sms_sent"] == 2
        assert data["app_notifications_sent"] == 1
        assert data["date"] == "2024-03-08"

    def test_emergency_with_message(self, faculty_client, school, use_fake_provider):
        StudentFactory(school=school)

        response = faculty_client.post(
            self.url,
            {"type": "emergency", "school_id": school.id, "message": "Early dismissal at 12:00"},
            format="json",
        )

        assert response.status_code == 200
        assert use_fake_provider.sent[0][1] == "Early dismissal at 12:00"

    def test_no_audience(self, faculty_client, school, use_fake_provider):
        response = faculty_client.post(
            self.url,
            {"type": "absence_alert", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["data"]["state"] == "no_audience"
        assert response.data["data"]["sent"] == 0

    def test_invalid_type(self, faculty_client, school):
        response = faculty_client.post(
            self.url,
            {"type": "homework", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["type"] == ["Invalid notification type"]

    def test_missing_school_id(self, faculty_client):
        response = faculty_client.post(self.url, {"type": "general"}, format="json")

        assert response.status_code == 400
        assert "school_id" in response.data

    def test_unknown_school_is_404(self, faculty_client, db):
        response = faculty_client.post(
            self.url,
            {"type": "general", "school_id": 999999},
            format="json",
        )

        assert response.status_code == 404
        assert response.data["error_code"] == "SCHOOL_NOT_FOUND"

    def test_storage_failure_is_503(self, faculty_client, school, mocker):
        mocker.patch.object(School.objects, "filter", side_effect=DatabaseError("gone"))

        response = faculty_client.post(
            self.url,
            {"type": "general", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 503
        assert response.data["success"] is False
        assert response.data["error_code"] == "AUDIENCE_QUERY_FAILED"

    def test_parent_is_denied(self, parent_client, school):
        response = parent_client.post(
            self.url,
            {"type": "general", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 403


@pytest.fixture
def cron_secret(settings):
    settings.NOTIFICATIONS_CRON_SECRET = "cron-secret"
    return "cron-secret"


@freeze_time("2024-03-08 06:00:00")
class TestTriggerAttendance:
    url = reverse_lazy("notifications:trigger-attendance")

    def test_scheduler_with_cron_secret(self, api_client, school, cron_secret, use_fake_provider):
        StudentFactory(school=school)

        response = api_client.post(
            self.url,
            {"type": "weekly_report", "school_id": school.id},
            format="json",
            HTTP_X_CRON_SECRET=cron_secret,
        )

        assert response.status_code == 200
        assert response.data["data"]["period"] == "2024-03-02 to 2024-03-08"
        assert response.data["data"]["sms_sent"] == 1

    def test_wrong_cron_secret(self, api_client, school, cron_secret):
        response = api_client.post(
            self.url,
            {"type": "weekly_report", "school_id": school.id},
            format="json",
            HTTP_X_CRON_SECRET="guess",
        )

        assert response.status_code == 401

    def test_teacher_with_attendance_access(self, faculty_client, school, use_fake_provider):
        AttendanceFactory(student=StudentFactory(school=school), status="absent")

        response = faculty_client.post(
            self.url,
            {"type": "absence_alert", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["data"]["sms_sent"] == 1

    def test_only_attendance_types(self, faculty_client, school):
        response = faculty_client.post(
            self.url,
            {"type": "emergency", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 400

    def test_user_without_attendance_access_is_denied(self, user_client, school):
        response = user_client.post(
            self.url,
            {"type": "absence_alert", "school_id": school.id},
            format="json",
        )

        assert response.status_code == 403
