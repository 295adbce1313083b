"""
Notification delivery exceptions.

Exception Hierarchy:
    ExternalServiceError (core)
    └── ChannelDeliveryError - A single recipient could not be reached
        ├── InvalidPhoneNumberError - Number failed normalization
        └── ProviderTimeoutError - Gateway did not answer in time

Channel delivery errors never escape a batch: the SMS channel catches
them per recipient and records a failed DeliveryResult. Missing provider
credentials are a core ConfigurationError, raised before the batch starts.

Usage:
    from notifications.exceptions import ChannelDeliveryError

    try:
        message_id = provider.send(phone, body)
    except ChannelDeliveryError as e:
        results.append(DeliveryResult.failed(phone, e.message))
"""

from core.exceptions import ExternalServiceError


class ChannelDeliveryError(ExternalServiceError):
    """Raised when a message could not be delivered to one recipient."""

    default_error_code: str = "CHANNEL_DELIVERY_FAILED"


class InvalidPhoneNumberError(ChannelDeliveryError):
    default_error_code: str = "INVALID_PHONE_NUMBER"


class ProviderTimeoutError(ChannelDeliveryError):
    default_error_code: str = "PROVIDER_TIMEOUT"
