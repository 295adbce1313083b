"""
In-app delivery channel.

Inserts one Notification per recipient in a single batch through
NotificationService. The batch is all-or-nothing: a storage failure marks
every recipient failed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.exceptions import StorageError
from notifications.channels.base import ChannelResult, DeliveryResult
from notifications.models import NotificationType
from notifications.services import NotificationService
from notifications.templates import build_in_app_content

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notifications.channels.base import OutboundMessage, Recipient

logger = logging.getLogger(__name__)


class InAppChannel:
    name = "in_app"

    def is_eligible(self, recipient: Recipient) -> bool:
        return recipient.has_account

    def deliver(self, recipients: Sequence[Recipient], message: OutboundMessage) -> ChannelResult:
        if not recipients:
            return ChannelResult(channel=self.name)

        content = build_in_app_content(
            message.event_type,
            school_name=message.school_name,
            message=message.message,
            title=message.title,
        )
        notification_type = (
            message.event_type
            if message.event_type in NotificationType.values
            else NotificationType.GENERAL
        )

        try:
            created = NotificationService.create_bulk(
                [(recipient.user_id, self._row_data(recipient, message)) for recipient in recipients],
                notification_type=notification_type,
                title=content.title,
                message=content.message,
                priority=content.priority,
                action_url=content.action_url,
            )
        except StorageError as e:
            logger.error(f"In-app batch of {len(recipients)} failed: {e}")
            return ChannelResult(
                channel=self.name,
                results=[
                    DeliveryResult.failed(str(recipient.user_id), e.message, name=recipient.name)
                    for recipient in recipients
                ],
                error=e.message,
            )

        return ChannelResult(
            channel=self.name,
            results=[
                DeliveryResult.sent(
                    str(notification.user_id),
                    str(notification.pk) if notification.pk else None,
                    name=recipient.name,
                )
                for notification, recipient in zip(created, recipients)
            ],
        )

    @staticmethod
    def _row_data(recipient: Recipient, message: OutboundMessage) -> dict:
        data = dict(message.data)
        if recipient.student_id is not None:
            data["student_id"] = recipient.student_id
            data["student_name"] = recipient.student_name
        data.update(recipient.context)
        return data
