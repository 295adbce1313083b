"""
Twilio SMS provider.

Configuration:
    TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER
    TWILIO_API_BASE_URL (optional, for regional edges)

Usage:
    from notifications.providers.twilio import TwilioProvider

    provider = TwilioProvider.from_settings()
    sid = provider.send("9876543210", "Hello")
"""

from __future__ import annotations

from django.conf import settings

from core.exceptions import ConfigurationError
from notifications.phone import to_international
from notifications.providers.base import BaseSmsProvider


class TwilioProvider(BaseSmsProvider):
    """
    Sends through the Twilio Messages REST API.

    Form-encoded POST with HTTP basic auth (account SID and auth token).
    Numbers are sent in E.164 form.
    """

    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com",
        **kwargs,
    ):
        missing = [
            setting
            for setting, value in (
                ("TWILIO_ACCOUNT_SID", account_sid),
                ("TWILIO_AUTH_TOKEN", auth_token),
                ("TWILIO_PHONE_NUMBER", from_number),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Twilio credentials not configured",
                error_code="SMS_PROVIDER_NOT_CONFIGURED",
                details={"provider": self.name, "missing": missing},
            )
        super().__init__(**kwargs)
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, **kwargs) -> TwilioProvider:
        return cls(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_number=settings.TWILIO_PHONE_NUMBER,
            base_url=getattr(settings, "TWILIO_API_BASE_URL", "https://api.twilio.com"),
            **kwargs,
        )

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Messages.json"

    def send(self, to: str, body: str) -> str:
        payload = self._post(
            self.messages_url,
            data={"To": to_international(to), "From": self.from_number, "Body": body},
            auth=(self.account_sid, self.auth_token),
        )
        return str(payload.get("sid", ""))
