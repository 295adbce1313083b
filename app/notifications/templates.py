"""
Message templates for notification events.

Two renderers:
- render_sms_message: Short SMS body, signed with SMS_SIGNATURE
- build_in_app_content: Title, message, priority and link for the inbox

Both switch on the event type and fall back to the general template for
anything else (homework, report_card, unknown strings). An explicit
message from the caller replaces the template text verbatim.

Usage:
    from notifications.templates import render_sms_message

    body = render_sms_message(
        "absence_alert",
        {"name": "Parent", "student_name": "Asha", "school_name": "Greenfield"},
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings

from notifications.models import NotificationPriority, NotificationType

if TYPE_CHECKING:
    from typing import Any


def _signature() -> str:
    return getattr(settings, "SMS_SIGNATURE", "School OS")


def render_sms_message(
    event_type: str,
    context: dict[str, Any] | None = None,
    message: str | None = None,
) -> str:
    """
    Render the SMS body for one recipient.

    Context keys used per type:
        absence_alert: name, student_name, school_name
        weekly_report: student_name, present, absent, percentage
        emergency: emergency_message
        general (and fallback): school_name
    """
    if message:
        return message

    context = context or {}
    signature = _signature()

    if event_type == NotificationType.ABSENCE_ALERT:
        return (
            f"Dear {context.get('name') or 'Parent'}, your child "
            f"{context.get('student_name') or 'student'} is marked absent today at "
            f"{context.get('school_name') or 'school'}. If this is an error, please "
            f"contact the class teacher immediately. - {signature}"
        )
    if event_type == NotificationType.WEEKLY_REPORT:
        return (
            f"Weekly Attendance Report for {context.get('student_name') or 'student'}:\n"
            f"Present: {context.get('present') or 0} days\n"
            f"Absent: {context.get('absent') or 0} days\n"
            f"Attendance: {context.get('percentage') or 0}%\n"
            f"- {signature}"
        )
    if event_type == NotificationType.EMERGENCY:
        return (
            f"URGENT: {context.get('emergency_message') or 'Emergency alert from school'}. "
            f"Please contact school immediately. - {signature}"
        )
    return f"Notification from {context.get('school_name') or 'school'}. - {signature}"


@dataclass(frozen=True)
class InAppContent:
    title: str
    message: str
    priority: str
    action_url: str = ""


def build_in_app_content(
    event_type: str,
    school_name: str = "",
    message: str | None = None,
    title: str | None = None,
) -> InAppContent:
    """Inbox content for an event; explicit title/message win over defaults."""
    school = school_name or "school"

    if event_type == NotificationType.ABSENCE_ALERT:
        content = InAppContent(
            title="Absence Alert",
            message=(
                "Your child was marked absent today. If this is an error, "
                "please contact the class teacher."
            ),
            priority=NotificationPriority.HIGH,
            action_url="/dashboard/parent/attendance/alerts",
        )
    elif event_type == NotificationType.WEEKLY_REPORT:
        content = InAppContent(
            title="Weekly Attendance Report",
            message="Your child's attendance report for the week is now available.",
            priority=NotificationPriority.MEDIUM,
            action_url="/dashboard/parent/attendance/weekly",
        )
    elif event_type == NotificationType.EMERGENCY:
        content = InAppContent(
            title="Emergency Alert",
            message="Emergency alert from school. Please contact school immediately.",
            priority=NotificationPriority.URGENT,
        )
    else:
        content = InAppContent(
            title=f"Notification from {school}",
            message=f"You have a new notification from {school}.",
            priority=NotificationPriority.MEDIUM,
        )

    return InAppContent(
        title=title or content.title,
        message=message or content.message,
        priority=str(content.priority),
        action_url=content.action_url,
    )
