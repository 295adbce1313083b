"""
SMS delivery channel.

Sends one templated SMS per recipient through the configured provider.
Recipients are processed sequentially; a failure for one (bad number,
gateway rejection, timeout) becomes a failed DeliveryResult and the batch
moves on. Every attempt is written to SmsDeliveryLog.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError

from notifications.channels.base import ChannelResult, DeliveryResult
from notifications.exceptions import ChannelDeliveryError
from notifications.models import SmsDeliveryLog
from notifications.phone import normalize_phone
from notifications.providers import get_sms_provider
from notifications.templates import render_sms_message

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notifications.channels.base import OutboundMessage, Recipient
    from notifications.providers import SmsProvider

logger = logging.getLogger(__name__)


class SmsChannel:
    """
    SMS channel backed by an SmsProvider.

    The provider is resolved when a batch starts, so missing credentials
    raise ConfigurationError once, before any recipient is attempted.
    """

    name = "sms"

    def __init__(self, provider: SmsProvider | None = None):
        self._provider = provider

    @property
    def provider(self) -> SmsProvider:
        if self._provider is None:
            self._provider = get_sms_provider()
        return self._provider

    def is_eligible(self, recipient: Recipient) -> bool:
        return recipient.has_phone

    def deliver(self, recipients: Sequence[Recipient], message: OutboundMessage) -> ChannelResult:
        provider = self.provider
        results: list[DeliveryResult] = []
        logs: list[SmsDeliveryLog] = []

        for recipient in recipients:
            body = render_sms_message(
                message.event_type,
                {
                    **message.data,
                    "name": recipient.name,
                    "student_name": recipient.student_name,
                    "school_name": message.school_name,
                    **recipient.context,
                },
                message.message,
            )
            phone = recipient.phone
            try:
                phone = normalize_phone(recipient.phone)
                message_id = provider.send(phone, body)
            except ChannelDeliveryError as e:
                logger.warning(f"SMS to {recipient.phone!r} failed: {e}")
                results.append(DeliveryResult.failed(recipient.phone, e.message, name=recipient.name))
                logs.append(self._log(phone, message.event_type, body, provider.name, error=e.message))
            except Exception as e:
                logger.exception(f"Unexpected error sending SMS to {recipient.phone!r}")
                error = str(e) or e.__class__.__name__
                results.append(DeliveryResult.failed(recipient.phone, error, name=recipient.name))
                logs.append(self._log(phone, message.event_type, body, provider.name, error=error))
            else:
                results.append(DeliveryResult.sent(phone, message_id, name=recipient.name))
                logs.append(self._log(phone, message.event_type, body, provider.name, message_id=message_id))

        self._write_logs(logs)
        return ChannelResult(channel=self.name, results=results)

    @staticmethod
    def _log(
        phone: str,
        event_type: str,
        body: str,
        provider_name: str,
        message_id: str | None = None,
        error: str = "",
    ) -> SmsDeliveryLog:
        return SmsDeliveryLog(
            phone=(phone or "")[:32],
            event_type=event_type,
            message=body,
            provider=provider_name,
            status=SmsDeliveryLog.Status.FAILED if error else SmsDeliveryLog.Status.SENT,
            provider_message_id=message_id or "",
            error=error,
        )

    @staticmethod
    def _write_logs(logs: list[SmsDeliveryLog]) -> None:
        if not logs:
            return
        try:
            SmsDeliveryLog.objects.bulk_create(logs)
        except DatabaseError as e:
            # Messages already went out; losing the audit rows must not fail the batch
            logger.error(f"Failed to write {len(logs)} SMS delivery logs: {e}")
