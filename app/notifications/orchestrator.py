"""
Notification event orchestration.

Dispatching an event walks four states:

    COLLECTING   -> resolve the audience for the event from school data
    PARTITIONED  -> split it per channel by eligibility (phone / account)
    DISPATCHING  -> call every channel, isolating failures per channel
    AGGREGATED   -> combine channel results into one DeliverySummary

An empty audience ends at NO_AUDIENCE without touching any channel. A
dispatch always returns a summary for partial failures; only input errors
(unknown event type, unknown school) and an unreachable database raise.

Usage:
    from notifications.orchestrator import NotificationEvent, NotificationOrchestrator

    summary = NotificationOrchestrator.dispatch(
        NotificationEvent(event_type="absence_alert", school_id=school.id, class_name="7")
    )
    summary.to_dict()
    # {"state": "aggregated", "total_audience": 3, "sms_sent": 2, ...}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError, models
from django.utils import timezone

from core.exceptions import ConfigurationError, NotFoundError, StorageError, ValidationError
from core.services import BaseService
from notifications import audience
from notifications.channels import ChannelResult, DeliveryResult, OutboundMessage, get_channels
from notifications.models import NotificationType
from schools.models import School

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

    from notifications.channels import NotificationChannel, Recipient


DISPATCHABLE_TYPES = (
    NotificationType.ABSENCE_ALERT,
    NotificationType.WEEKLY_REPORT,
    NotificationType.EMERGENCY,
    NotificationType.GENERAL,
)

ATTENDANCE_TYPES = (
    NotificationType.ABSENCE_ALERT,
    NotificationType.WEEKLY_REPORT,
)


class DispatchState(models.TextChoices):
    COLLECTING = "collecting", "Collecting"
    PARTITIONED = "partitioned", "Partitioned"
    DISPATCHING = "dispatching", "Dispatching"
    AGGREGATED = "aggregated", "Aggregated"
    NO_AUDIENCE = "no_audience", "No audience"


@dataclass
class NotificationEvent:
    """
    A school-scoped event to notify parents about.

    Attributes:
        event_type: One of DISPATCHABLE_TYPES
        school_id: School whose students form the audience
        class_name: Optional class filter
        section: Optional section filter
        date: Absence date, or last day of a weekly report (default today)
        message: Explicit text, replaces the templates verbatim
        title: Explicit in-app title
        sms_cap: Maximum SMS for this dispatch (None: type default)
        data: Extra template context (e.g. emergency_message)

    Raises:
        ValidationError: On an unknown type, missing school or negative cap
    """

    event_type: str
    school_id: int | None
    class_name: str | None = None
    section: str | None = None
    date: date | None = None
    message: str | None = None
    title: str | None = None
    sms_cap: int | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.event_type not in DISPATCHABLE_TYPES:
            raise ValidationError(
                "Invalid notification type",
                error_code="INVALID_EVENT_TYPE",
                details={"type": self.event_type, "allowed": [str(t) for t in DISPATCHABLE_TYPES]},
            )
        if not self.school_id:
            raise ValidationError("school_id is required", error_code="MISSING_SCHOOL_ID")
        if self.sms_cap is not None and self.sms_cap < 0:
            raise ValidationError("sms_cap must not be negative", error_code="INVALID_SMS_CAP")
        self.event_type = str(self.event_type)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form, used as the Celery task payload."""
        return {
            "event_type": self.event_type,
            "school_id": self.school_id,
            "class_name": self.class_name,
            "section": self.section,
            "date": self.date.isoformat() if self.date else None,
            "message": self.message,
            "title": self.title,
            "sms_cap": self.sms_cap,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> NotificationEvent:
        on_date = payload.get("date")
        if isinstance(on_date, str):
            on_date = date.fromisoformat(on_date)
        return cls(
            event_type=payload.get("event_type") or payload.get("type") or "",
            school_id=payload.get("school_id"),
            class_name=payload.get("class_name") or None,
            section=payload.get("section") or None,
            date=on_date,
            message=payload.get("message") or None,
            title=payload.get("title") or None,
            sms_cap=payload.get("sms_cap"),
            data=dict(payload.get("data") or {}),
        )


@dataclass
class DeliverySummary:
    """
    Aggregated outcome of one dispatch.

    channels holds one ChannelResult per channel that took part; errors
    holds one message per channel that failed as a whole.
    """

    event_type: str
    school_id: int | None = None
    state: str = DispatchState.COLLECTING
    total_audience: int = 0
    channels: dict[str, ChannelResult] = field(default_factory=dict)
    date: str | None = None
    period: str | None = None
    errors: dict[str, str] = field(default_factory=dict)

    def channel(self, name: str) -> ChannelResult:
        return self.channels.get(name) or ChannelResult(channel=name)

    @property
    def sent(self) -> int:
        return sum(result.sent for result in self.channels.values())

    @property
    def failed(self) -> int:
        return sum(result.failed for result in self.channels.values())

    def to_dict(self, include_results: bool = False) -> dict[str, Any]:
        sms = self.channel("sms")
        app = self.channel("in_app")
        summary: dict[str, Any] = {
            "state": str(self.state),
            "event_type": self.event_type,
            "school_id": self.school_id,
            "total_audience": self.total_audience,
            "sms": {**sms.to_dict(include_results), "dropped": sms.dropped},
            "app": app.to_dict(include_results),
            "sms_sent": sms.sent,
            "app_notifications_sent": app.sent,
            "sent": self.sent,
            "failed": self.failed,
            "errors": dict(self.errors),
        }
        if self.date:
            summary["date"] = self.date
        if self.period:
            summary["period"] = self.period
        return summary


class NotificationOrchestrator(BaseService):
    """
    Resolves an event's audience and fans it out across channels.

    Methods:
        dispatch: Run one event through COLLECTING .. AGGREGATED
    """

    @classmethod
    def dispatch(
        cls,
        event: NotificationEvent,
        channels: Iterable[NotificationChannel] | None = None,
    ) -> DeliverySummary:
        """
        Dispatch an event.

        Args:
            event: The event to dispatch
            channels: Channels to use (default: NOTIFICATIONS_CHANNELS)

        Returns:
            DeliverySummary, also for partial and total channel failures

        Raises:
            NotFoundError: Unknown school
            StorageError: Audience query failed
            ConfigurationError: Unknown channel configured
        """
        logger = cls.get_logger()
        channels = list(channels) if channels is not None else get_channels()
        summary = DeliverySummary(event_type=event.event_type, school_id=event.school_id)

        # COLLECTING
        try:
            school = School.objects.filter(pk=event.school_id).first()
        except DatabaseError as e:
            logger.error(f"School lookup for {event.event_type} failed: {e}")
            raise StorageError(
                "Could not load notification audience",
                error_code="AUDIENCE_QUERY_FAILED",
                details={"school_id": event.school_id},
            ) from e
        if school is None:
            raise NotFoundError(
                "School not found",
                error_code="SCHOOL_NOT_FOUND",
                details={"school_id": event.school_id},
            )
        recipients, shared_data = cls._collect(event, school, summary)
        summary.total_audience = len(recipients)

        if not recipients:
            summary.state = DispatchState.NO_AUDIENCE
            logger.info(
                f"No audience for {event.event_type} at school {school.pk}; nothing sent"
            )
            return summary

        # PARTITIONED
        summary.state = DispatchState.PARTITIONED
        batches = []
        for channel in channels:
            eligible = [recipient for recipient in recipients if channel.is_eligible(recipient)]
            dropped = 0
            cap = cls._sms_cap(event) if channel.name == "sms" else None
            if cap is not None and len(eligible) > cap:
                dropped = len(eligible) - cap
                eligible = eligible[:cap]
                logger.warning(
                    f"SMS cap {cap} reached for {event.event_type} at school {school.pk}; "
                    f"{dropped} recipients dropped"
                )
            batches.append((channel, eligible, dropped))

        # DISPATCHING
        summary.state = DispatchState.DISPATCHING
        message = OutboundMessage(
            event_type=event.event_type,
            school_name=school.name,
            message=event.message,
            title=event.title,
            data={**event.data, **shared_data},
        )
        for channel, eligible, dropped in batches:
            result = cls._deliver(channel, eligible, message)
            result.dropped = dropped
            if result.error:
                summary.errors[channel.name] = result.error
            summary.channels[channel.name] = result

        # AGGREGATED
        summary.state = DispatchState.AGGREGATED
        logger.info(
            f"Dispatched {event.event_type} for school {school.pk}: "
            f"audience={summary.total_audience} sms={summary.channel('sms').sent}/"
            f"{summary.channel('sms').total} app={summary.channel('in_app').sent}/"
            f"{summary.channel('in_app').total} dropped={summary.channel('sms').dropped}"
        )
        return summary

    @classmethod
    def _collect(
        cls,
        event: NotificationEvent,
        school: School,
        summary: DeliverySummary,
    ) -> tuple[list[Recipient], dict[str, Any]]:
        today = timezone.localdate()
        try:
            if event.event_type == NotificationType.ABSENCE_ALERT:
                on_date = event.date or today
                summary.date = on_date.isoformat()
                recipients = audience.absent_students(
                    school, on_date, event.class_name, event.section
                )
                return recipients, {"date": summary.date}

            if event.event_type == NotificationType.WEEKLY_REPORT:
                days = max(1, getattr(settings, "NOTIFICATIONS_WEEKLY_REPORT_DAYS", 7))
                end = event.date or today
                start = end - timedelta(days=days - 1)
                summary.period = f"{start.isoformat()} to {end.isoformat()}"
                recipients = audience.weekly_attendance(
                    school, start, end, event.class_name, event.section
                )
                return recipients, {"start_date": start.isoformat(), "end_date": end.isoformat()}

            return audience.school_students(school, event.class_name, event.section), {}
        except DatabaseError as e:
            cls.get_logger().error(f"Audience query for {event.event_type} failed: {e}")
            raise StorageError(
                "Could not load notification audience",
                error_code="AUDIENCE_QUERY_FAILED",
                details={"school_id": school.pk},
            ) from e

    @staticmethod
    def _sms_cap(event: NotificationEvent) -> int | None:
        if event.sms_cap is not None:
            return event.sms_cap
        if event.event_type == NotificationType.WEEKLY_REPORT:
            return getattr(settings, "NOTIFICATIONS_WEEKLY_SMS_CAP", 100)
        return None

    @classmethod
    def _deliver(
        cls,
        channel: NotificationChannel,
        recipients: list[Recipient],
        message: OutboundMessage,
    ) -> ChannelResult:
        """Run one channel; whatever it raises stays inside this channel."""
        if not recipients:
            return ChannelResult(channel=channel.name)

        try:
            return channel.deliver(recipients, message)
        except ConfigurationError as e:
            # Raised before the first send, so nobody was attempted
            cls.get_logger().error(f"{channel.name} channel not configured: {e}")
            return ChannelResult(channel=channel.name, error=e.message)
        except Exception as e:
            cls.get_logger().exception(f"{channel.name} channel failed for {message.event_type}")
            return ChannelResult(
                channel=channel.name,
                results=[
                    DeliveryResult.failed(recipient.phone or str(recipient.user_id), str(e), name=recipient.name)
                    for recipient in recipients
                ],
                error=str(e),
            )
