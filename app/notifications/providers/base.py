"""
Base SMS provider protocol definition.

Defines the interface every SMS gateway implements. Uses Python Protocol
for structural subtyping, so test doubles need no inheritance.

Usage:
    from notifications.providers.base import BaseSmsProvider

    class MyProvider(BaseSmsProvider):
        name = "mine"

        def send(self, to, body):
            payload = self._post("https://sms.example.com/send", json={...})
            return payload["id"]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx
from django.conf import settings

from notifications.exceptions import ChannelDeliveryError, ProviderTimeoutError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


@runtime_checkable
class SmsProvider(Protocol):
    """
    Protocol for SMS gateway implementations.

    Attributes:
        name: Registry key ("twilio", "msg91"), stored on delivery logs

    Required Methods:
        send: Deliver one message, return the provider's message id
    """

    name: str

    def send(self, to: str, body: str) -> str:
        """
        Send one SMS.

        Args:
            to: Normalized 10-digit local number
            body: Message text

        Returns:
            Provider message id

        Raises:
            ChannelDeliveryError: Rejected, unreachable or timed out
        """
        ...


class BaseSmsProvider:
    """
    Base implementation with the shared HTTP plumbing.

    Every call goes through httpx with a bounded timeout
    (SMS_PROVIDER_TIMEOUT_SECONDS). Transport failures and error
    responses are translated to ChannelDeliveryError so callers only deal
    with one exception family.

    Attributes:
        timeout: Per-call timeout in seconds
        client: Optional shared httpx.Client (tests inject a MockTransport)
    """

    name: str = ""

    def __init__(
        self,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ):
        if timeout is None:
            timeout = getattr(settings, "SMS_PROVIDER_TIMEOUT_SECONDS", 5.0)
        self.timeout = float(timeout)
        self.client = client

    def send(self, to: str, body: str) -> str:
        raise NotImplementedError

    def _post(self, url: str, **kwargs: Any) -> dict:
        """
        POST to the gateway and return the decoded JSON body.

        Raises:
            ProviderTimeoutError: No answer within self.timeout
            ChannelDeliveryError: Network failure or non-2xx response
        """
        try:
            if self.client is not None:
                response = self.client.post(url, timeout=self.timeout, **kwargs)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"{self.name} did not respond within {self.timeout}s",
                details={"provider": self.name},
            ) from e
        except httpx.HTTPError as e:
            raise ChannelDeliveryError(
                f"{self.name} request failed: {e}",
                details={"provider": self.name},
            ) from e

        payload = self._decode(response)
        if response.is_error:
            reason = payload.get("message") or response.reason_phrase or "Unknown error"
            logger.warning(f"{self.name} rejected message: {response.status_code} {reason}")
            raise ChannelDeliveryError(
                f"{self.name} error: {reason}",
                error_code="PROVIDER_REJECTED",
                details={"provider": self.name, "status_code": response.status_code},
            )
        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> dict:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}
