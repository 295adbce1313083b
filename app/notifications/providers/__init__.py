"""
SMS provider implementations.

This package contains provider-specific implementations:
- base.py: SmsProvider protocol and shared HTTP plumbing
- twilio.py: Twilio implementation
- msg91.py: MSG91 implementation

Provider Selection:
    The gateway is chosen by configuration (SMS_PROVIDER), never by the
    caller. Use the get_sms_provider() factory function.

Usage:
    from notifications.providers import get_sms_provider

    provider = get_sms_provider()          # SMS_PROVIDER from settings
    message_id = provider.send("9876543210", "Hello")

Adding New Providers:
    1. Create new file (e.g., gupshup.py)
    2. Subclass BaseSmsProvider with a from_settings() classmethod
    3. Register in PROVIDERS dict below
"""

from __future__ import annotations

import logging

from django.conf import settings

from core.exceptions import ConfigurationError
from notifications.providers.base import BaseSmsProvider, SmsProvider
from notifications.providers.msg91 import Msg91Provider
from notifications.providers.twilio import TwilioProvider

logger = logging.getLogger(__name__)

# Provider registry
# Maps SMS_PROVIDER value to provider class
PROVIDERS: dict[str, type[BaseSmsProvider]] = {
    "twilio": TwilioProvider,
    "msg91": Msg91Provider,
}


def get_sms_provider(provider_type: str | None = None, **kwargs) -> SmsProvider:
    """
    Get the configured SMS provider instance.

    Credentials are checked here, before any message is attempted.

    Args:
        provider_type: Registry key, defaults to settings.SMS_PROVIDER
        **kwargs: Provider options (timeout, client)

    Raises:
        ConfigurationError: Unknown provider or missing credentials
    """
    provider_type = (provider_type or getattr(settings, "SMS_PROVIDER", "") or "").lower()
    provider_class = PROVIDERS.get(provider_type)
    if provider_class is None:
        logger.error(f"Invalid SMS provider configured: {provider_type!r}")
        raise ConfigurationError(
            "Invalid SMS provider configured",
            error_code="UNKNOWN_SMS_PROVIDER",
            details={"provider": provider_type, "available": list_providers()},
        )
    return provider_class.from_settings(**kwargs)


def list_providers() -> list[str]:
    """Get list of available provider types."""
    return list(PROVIDERS.keys())


__all__ = [
    "PROVIDERS",
    "BaseSmsProvider",
    "Msg91Provider",
    "SmsProvider",
    "TwilioProvider",
    "get_sms_provider",
    "list_providers",
]
