"""
Tests for notification Celery tasks.

Tasks are called directly (synchronously); the fan-out task's .delay is
mocked so no broker is involved.
"""

import pytest
from freezegun import freeze_time

from core.exceptions import StorageError, ValidationError
from notifications.orchestrator import NotificationEvent
from notifications.tasks import dispatch_notification_event, send_weekly_reports_for_all_schools
from schools.tests.factories import AttendanceFactory, SchoolFactory, StudentFactory


@pytest.mark.django_db
class TestDispatchNotificationEvent:
    @freeze_time("2024-03-08 06:00:00")
    def test_returns_summary_dict(self, school, use_fake_provider):
        AttendanceFactory(student=StudentFactory(school=school), status="absent")
        payload = NotificationEvent(event_type="absence_alert", school_id=school.id).to_dict()

        result = dispatch_notification_event(payload)

        assert result["state"] == "aggregated"
        assert result["total_audience"] == 1
        assert result["sms_sent"] == 1
        assert result["date"] == "2024-03-08"

    def test_invalid_payload_raises(self):
        with pytest.raises(ValidationError):
            dispatch_notification_event({"event_type": "homework", "school_id": 1})

    def test_storage_errors_are_retried(self):
        assert StorageError in dispatch_notification_event.autoretry_for


@pytest.mark.django_db
class TestSendWeeklyReportsForAllSchools:
    def test_queues_one_dispatch_per_active_school(self, mocker):
        delay = mocker.patch("notifications.tasks.dispatch_notification_event.delay")
        first = SchoolFactory()
        second = SchoolFactory()
        SchoolFactory(is_active=False)

        result = send_weekly_reports_for_all_schools()

        assert result == {"queued": 2}
        queued = [call.args[0] for call in delay.call_args_list]
        assert [payload["school_id"] for payload in queued] == [first.id, second.id]
        assert {payload["event_type"] for payload in queued} == {"weekly_report"}

    def test_no_schools(self, mocker):
        delay = mocker.patch("notifications.tasks.dispatch_notification_event.delay")

        assert send_weekly_reports_for_all_schools() == {"queued": 0}
        delay.assert_not_called()
