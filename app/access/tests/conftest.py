"""
Fixtures for access tests.
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import (
    CoAdminFactory,
    FacultyFactory,
    ParentFactory,
    SuperAdminFactory,
    UserFactory,
)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def super_admin(db):
    return SuperAdminFactory()


@pytest.fixture
def faculty(db):
    return FacultyFactory()


@pytest.fixture
def co_admin(db):
    return CoAdminFactory()


@pytest.fixture
def student(db):
    return UserFactory()


@pytest.fixture
def parent(db):
    return ParentFactory()


@pytest.fixture
def admin_client(api_client, super_admin):
    api_client.force_authenticate(user=super_admin)
    return api_client
