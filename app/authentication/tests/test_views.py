"""
Tests for authentication endpoints (JWT issue and current user).
"""

from authentication.tests.factories import UserFactory


class TestTokenObtain:
    """POST /api/v1/auth/token/"""

    def test_returns_token_pair_for_valid_credentials(self, api_client, db):
        UserFactory(email="login@example.com", password="LoginPass123!")

        response = api_client.post(
            "/api/v1/auth/token/",
            {"email": "login@example.com", "password": "LoginPass123!"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, api_client, db):
        UserFactory(email="login2@example.com", password="LoginPass123!")

        response = api_client.post(
            "/api/v1/auth/token/",
            {"email": "login2@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == 401


class TestCurrentUserView:
    """GET /api/v1/auth/me/"""

    def test_returns_current_user_with_role(self, authenticated_client, user):
        response = authenticated_client.get("/api/v1/auth/me/")

        assert response.status_code == 200
        assert response.data["id"] == user.id
        assert response.data["role"] == "student"

    def test_returns_401_for_unauthenticated_request(self, api_client):
        response = api_client.get("/api/v1/auth/me/")

        assert response.status_code == 401
