"""
Notification delivery channels.

This package contains:
- base.py: NotificationChannel protocol, Recipient, DeliveryResult, ChannelResult
- sms.py: SMS through the configured provider
- in_app.py: Persisted inbox notifications

Channel Selection:
    The orchestrator dispatches to the channels named in
    NOTIFICATIONS_CHANNELS, in order. Adding a channel means adding a
    class here, not touching the orchestrator.

Usage:
    from notifications.channels import get_channels

    for channel in get_channels():
        eligible = [r for r in recipients if channel.is_eligible(r)]
        result = channel.deliver(eligible, message)
"""

from __future__ import annotations

from django.conf import settings

from core.exceptions import ConfigurationError
from notifications.channels.base import (
    ChannelResult,
    DeliveryResult,
    NotificationChannel,
    OutboundMessage,
    Recipient,
)
from notifications.channels.in_app import InAppChannel
from notifications.channels.sms import SmsChannel

# Channel registry
# Maps channel name to channel class
CHANNELS: dict[str, type] = {
    SmsChannel.name: SmsChannel,
    InAppChannel.name: InAppChannel,
}

DEFAULT_CHANNELS = ("sms", "in_app")


def get_channels() -> list[NotificationChannel]:
    """
    Instantiate the configured channels.

    Raises:
        ConfigurationError: If a configured channel name is unknown
    """
    names = getattr(settings, "NOTIFICATIONS_CHANNELS", None) or DEFAULT_CHANNELS
    unknown = [name for name in names if name not in CHANNELS]
    if unknown:
        raise ConfigurationError(
            "Unknown notification channel configured",
            details={"unknown": unknown, "available": list(CHANNELS)},
        )
    return [CHANNELS[name]() for name in names]


__all__ = [
    "CHANNELS",
    "ChannelResult",
    "DeliveryResult",
    "InAppChannel",
    "NotificationChannel",
    "OutboundMessage",
    "Recipient",
    "SmsChannel",
    "get_channels",
]
