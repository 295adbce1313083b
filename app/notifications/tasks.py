"""
Celery tasks for notification dispatch.

Tasks:
    dispatch_notification_event: Run one event through the orchestrator
    send_weekly_reports_for_all_schools: Fan out weekly reports per school

Design:
    - Tasks receive JSON-safe payloads (NotificationEvent.to_dict())
    - Storage failures are retried with backoff; input errors are not
    - The weekly fan-out is meant for an external beat/cron schedule

Usage:
    from notifications.tasks import dispatch_notification_event

    dispatch_notification_event.delay(
        {"event_type": "absence_alert", "school_id": school.id}
    )
"""

from __future__ import annotations

import logging

from celery import shared_task

from core.exceptions import StorageError
from notifications.models import NotificationType
from notifications.orchestrator import NotificationEvent, NotificationOrchestrator
from schools.models import School

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(StorageError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def dispatch_notification_event(self, event_data: dict) -> dict:
    """
    Dispatch a serialized NotificationEvent.

    Args:
        event_data: NotificationEvent.to_dict() payload

    Returns:
        DeliverySummary.to_dict()

    Raises:
        ValidationError / NotFoundError: Bad payload (not retried)
        StorageError: Audience query failed (retried)
    """
    event = NotificationEvent.from_dict(event_data)
    logger.info(
        f"Dispatching {event.event_type} for school {event.school_id} "
        f"(attempt {self.request.retries + 1})"
    )
    summary = NotificationOrchestrator.dispatch(event)
    return summary.to_dict()


@shared_task
def send_weekly_reports_for_all_schools() -> dict:
    """
    Queue a weekly_report dispatch for every active school.

    Returns:
        {"queued": <number of schools>}
    """
    school_ids = list(
        School.objects.filter(is_active=True).order_by("pk").values_list("pk", flat=True)
    )
    for school_id in school_ids:
        event = NotificationEvent(event_type=NotificationType.WEEKLY_REPORT, school_id=school_id)
        dispatch_notification_event.delay(event.to_dict())

    logger.info(f"Queued weekly reports for {len(school_ids)} schools")
    return {"queued": len(school_ids)}
