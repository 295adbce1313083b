"""
Test configuration and fixtures for notification tests.

This module provides:
- User fixtures (parent with an account, faculty, admin)
- School fixtures
- FakeSmsProvider, a recording SmsProvider test double
- API client helpers for authenticated requests

Usage:
    def test_example(parent_client, parent):
        response = parent_client.get("/api/v1/notifications/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import (
    FacultyFactory,
    ParentFactory,
    SuperAdminFactory,
    UserFactory,
)
from notifications.exceptions import ChannelDeliveryError
from schools.tests.factories import SchoolFactory


class FakeSmsProvider:
    """
    In-memory SmsProvider.

    Records every (to, body) it is asked to send and raises
    ChannelDeliveryError for numbers listed in fail_numbers.
    """

    name = "fake"

    def __init__(self, fail_numbers=()):
        self.fail_numbers = set(fail_numbers)
        self.sent = []

    def send(self, to, body):
        if to in self.fail_numbers:
            raise ChannelDeliveryError("fake error: undeliverable")
        self.sent.append((to, body))
        return f"fake-{len(self.sent)}"


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """A student account with the student defaults (Messages all)."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    return UserFactory()


@pytest.fixture
def parent(db):
    """A parent account; parents have no module access by default."""
    return ParentFactory()


@pytest.fixture
def faculty(db):
    return FacultyFactory()


@pytest.fixture
def super_admin(db):
    return SuperAdminFactory()


# =============================================================================
# School Fixtures
# =============================================================================


@pytest.fixture
def school(db):
    return SchoolFactory(name="Greenfield")


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def fake_provider():
    return FakeSmsProvider()


@pytest.fixture
def use_fake_provider(mocker, fake_provider):
    """Route every SmsChannel created without a provider to fake_provider."""
    mocker.patch("notifications.channels.sms.get_sms_provider", return_value=fake_provider)
    return fake_provider


@pytest.fixture
def twilio_settings(settings):
    settings.SMS_PROVIDER = "twilio"
    settings.TWILIO_ACCOUNT_SID = "AC123"
    settings.TWILIO_AUTH_TOKEN = "secret-token"
    settings.TWILIO_PHONE_NUMBER = "+15005550006"
    settings.TWILIO_API_BASE_URL = "https://api.twilio.com"
    return settings


@pytest.fixture
def msg91_settings(settings):
    settings.SMS_PROVIDER = "msg91"
    settings.MSG91_AUTH_KEY = "msg91-key"
    settings.MSG91_SENDER_ID = "SCHOOL"
    settings.MSG91_TEMPLATE_ID = ""
    settings.MSG91_API_URL = "https://api.msg91.com/api/v5/flow/"
    return settings


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def parent_client(parent):
    client = APIClient()
    client.force_authenticate(user=parent)
    return client


@pytest.fixture
def faculty_client(faculty):
    client = APIClient()
    client.force_authenticate(user=faculty)
    return client


@pytest.fixture
def admin_client(super_admin):
    client = APIClient()
    client.force_authenticate(user=super_admin)
    return client
