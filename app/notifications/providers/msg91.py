"""
MSG91 SMS provider.

Configuration:
    MSG91_AUTH_KEY, MSG91_SENDER_ID
    MSG91_TEMPLATE_ID (optional, DLT template)
    MSG91_API_URL (optional)
"""

from __future__ import annotations

from django.conf import settings

from core.exceptions import ConfigurationError
from notifications.exceptions import ChannelDeliveryError
from notifications.phone import to_international
from notifications.providers.base import BaseSmsProvider


class Msg91Provider(BaseSmsProvider):
    """
    Sends through the MSG91 flow API on the transactional route.

    JSON POST authenticated with the authkey header. MSG91 can answer
    200 with {"type": "error"}; that is treated as a rejection.
    """

    name = "msg91"

    TRANSACTIONAL_ROUTE = "4"

    def __init__(
        self,
        auth_key: str,
        sender_id: str,
        template_id: str = "",
        api_url: str = "https://api.msg91.com/api/v5/flow/",
        **kwargs,
    ):
        missing = [
            setting
            for setting, value in (("MSG91_AUTH_KEY", auth_key), ("MSG91_SENDER_ID", sender_id))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "MSG91 credentials not configured",
                error_code="SMS_PROVIDER_NOT_CONFIGURED",
                details={"provider": self.name, "missing": missing},
            )
        super().__init__(**kwargs)
        self.auth_key = auth_key
        self.sender_id = sender_id
        self.template_id = template_id
        self.api_url = api_url

    @classmethod
    def from_settings(cls, **kwargs) -> Msg91Provider:
        return cls(
            auth_key=settings.MSG91_AUTH_KEY,
            sender_id=settings.MSG91_SENDER_ID,
            template_id=getattr(settings, "MSG91_TEMPLATE_ID", ""),
            api_url=getattr(settings, "MSG91_API_URL", "https://api.msg91.com/api/v5/flow/"),
            **kwargs,
        )

    def send(self, to: str, body: str) -> str:
        request = {
            "sender": self.sender_id,
            "mobiles": to_international(to, with_plus=False),
            "message": body,
            "route": self.TRANSACTIONAL_ROUTE,
        }
        if self.template_id:
            request["template_id"] = self.template_id

        payload = self._post(self.api_url, json=request, headers={"authkey": self.auth_key})
        if payload.get("type") == "error":
            raise ChannelDeliveryError(
                f"msg91 error: {payload.get('message') or 'Unknown error'}",
                error_code="PROVIDER_REJECTED",
                details={"provider": self.name},
            )
        return str(payload.get("request_id") or payload.get("message") or "")
