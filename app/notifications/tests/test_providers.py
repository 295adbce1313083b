"""
Tests for SMS providers.

Gateways are faked with httpx.MockTransport injected through the
provider's client argument; no request leaves the process.
"""

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from core.exceptions import ConfigurationError
from notifications.exceptions import ChannelDeliveryError, ProviderTimeoutError
from notifications.providers import (
    Msg91Provider,
    SmsProvider,
    TwilioProvider,
    get_sms_provider,
    list_providers,
)


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestTwilioProvider:
    def test_send_posts_form_with_basic_auth(self, twilio_settings):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM123", "status": "queued"})

        provider = TwilioProvider.from_settings(client=mock_client(handler))

        message_id = provider.send("9876543210", "Hello")

        assert message_id == "SM123"
        assert captured["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
        expected_auth = base64.b64encode(b"AC123:secret-token").decode()
        assert captured["auth"] == f"Basic {expected_auth}"
        assert captured["form"] == {
            "To": ["+919876543210"],
            "From": ["+15005550006"],
            "Body": ["Hello"],
        }

    def test_error_response_raises_delivery_error(self, twilio_settings):
        def handler(request):
            return httpx.Response(400, json={"code": 21211, "message": "The 'To' number is not valid"})

        provider = TwilioProvider.from_settings(client=mock_client(handler))

        with pytest.raises(ChannelDeliveryError) as exc_info:
            provider.send("9876543210", "Hello")

        assert exc_info.value.message == "twilio error: The 'To' number is not valid"
        assert exc_info.value.error_code == "PROVIDER_REJECTED"
        assert exc_info.value.details["status_code"] == 400

    def test_error_without_json_uses_reason_phrase(self, twilio_settings):
        def handler(request):
            return httpx.Response(503, text="upstream down")

        provider = TwilioProvider.from_settings(client=mock_client(handler))

        with pytest.raises(ChannelDeliveryError) as exc_info:
            provider.send("9876543210", "Hello")

        assert exc_info.value.message == "twilio error: Service Unavailable"

    def test_timeout_raises_provider_timeout(self, twilio_settings):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        provider = TwilioProvider.from_settings(client=mock_client(handler), timeout=1)

        with pytest.raises(ProviderTimeoutError) as exc_info:
            provider.send("9876543210", "Hello")

        assert exc_info.value.error_code == "PROVIDER_TIMEOUT"
        assert "1.0s" in exc_info.value.message

    def test_network_error_raises_delivery_error(self, twilio_settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = TwilioProvider.from_settings(client=mock_client(handler))

        with pytest.raises(ChannelDeliveryError) as exc_info:
            provider.send("9876543210", "Hello")

        assert not isinstance(exc_info.value, ProviderTimeoutError)
        assert exc_info.value.error_code == "CHANNEL_DELIVERY_FAILED"

    def test_missing_credentials(self, twilio_settings):
        twilio_settings.TWILIO_AUTH_TOKEN = ""

        with pytest.raises(ConfigurationError) as exc_info:
            TwilioProvider.from_settings()

        assert exc_info.value.error_code == "SMS_PROVIDER_NOT_CONFIGURED"
        assert exc_info.value.details["missing"] == ["TWILIO_AUTH_TOKEN"]

    def test_timeout_defaults_to_settings(self, twilio_settings):
        twilio_settings.SMS_PROVIDER_TIMEOUT_SECONDS = 2

        assert TwilioProvider.from_settings().timeout == 2.0


class TestMsg91Provider:
    def test_send_posts_json_with_authkey(self, msg91_settings):
        captured = {}

        def handler(request):
            captured["authkey"] = request.headers["authkey"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"type": "success", "request_id": "req-42"})

        provider = Msg91Provider.from_settings(client=mock_client(handler))

        assert provider.send("9876543210", "Hello") == "req-42"
        assert captured["authkey"] == "msg91-key"
        assert captured["body"] == {
            "sender": "SCHOOL",
            "mobiles": "919876543210",
            "message": "Hello",
            "route": "4",
        }

    def test_template_id_is_sent_when_configured(self, msg91_settings):
        msg91_settings.MSG91_TEMPLATE_ID = "tmpl-1"
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"type": "success", "request_id": "req-1"})

        Msg91Provider.from_settings(client=mock_client(handler)).send("9876543210", "Hi")

        assert captured["body"]["template_id"] == "tmpl-1"

    def test_error_type_in_ok_response_is_rejection(self, msg91_settings):
        def handler(request):
            return httpx.Response(200, json={"type": "error", "message": "Invalid authkey"})

        provider = Msg91Provider.from_settings(client=mock_client(handler))

        with pytest.raises(ChannelDeliveryError) as exc_info:
            provider.send("9876543210", "Hello")

        assert exc_info.value.message == "msg91 error: Invalid authkey"

    def test_missing_credentials(self, msg91_settings):
        msg91_settings.MSG91_AUTH_KEY = ""
        msg91_settings.MSG91_SENDER_ID = ""

        with pytest.raises(ConfigurationError) as exc_info:
            Msg91Provider.from_settings()

        assert exc_info.value.details["missing"] == ["MSG91_AUTH_KEY", "MSG91_SENDER_ID"]


class TestGetSmsProvider:
    def test_uses_configured_provider(self, msg91_settings):
        provider = get_sms_provider()

        assert isinstance(provider, Msg91Provider)
        assert isinstance(provider, SmsProvider)

    def test_explicit_provider_type(self, twilio_settings):
        twilio_settings.SMS_PROVIDER = "msg91"

        assert isinstance(get_sms_provider("twilio"), TwilioProvider)

    def test_provider_type_is_case_insensitive(self, twilio_settings):
        twilio_settings.SMS_PROVIDER = "Twilio"

        assert get_sms_provider().name == "twilio"

    def test_unknown_provider(self, settings):
        settings.SMS_PROVIDER = "carrier-pigeon"

        with pytest.raises(ConfigurationError) as exc_info:
            get_sms_provider()

        assert exc_info.value.error_code == "UNKNOWN_SMS_PROVIDER"
        assert exc_info.value.details["available"] == ["twilio", "msg91"]

    def test_list_providers(self):
        assert list_providers() == ["twilio", "msg91"]
