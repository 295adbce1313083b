"""
Tests for access control endpoints.
"""

from urllib.parse import quote

from django.db import DatabaseError

from access.models import ModuleAccess
from access.services import AccessPolicyService
from access.tests.factories import ModuleAccessFactory


class TestModuleCatalogView:
    """GET /api/v1/access/modules/"""

    def test_lists_catalog(self, api_client, student):
        api_client.force_authenticate(user=student)

        response = api_client.get("/api/v1/access/modules/")

        assert response.status_code == 200
        assert len(response.data) == 14
        assert response.data[0] == {
            "name": "Dashboard",
            "path": "/dashboard",
            "description": "Main dashboard overview",
        }

    def test_requires_authentication(self, api_client, db):
        assert api_client.get("/api/v1/access/modules/").status_code == 401


class TestMyAccessView:
    """GET /api/v1/access/me/"""

    def test_returns_own_access(self, api_client, faculty):
        api_client.force_authenticate(user=faculty)

        response = api_client.get("/api/v1/access/me/")

        assert response.status_code == 200
        assert response.data["role"] == "faculty"
        assert response.data["is_super_admin"] is False
        assert response.data["access"]["Attendance"] == "all"
        assert len(response.data["modules"]) == 12


class TestUserAccessAdmin:
    """/api/v1/access/users/{id}/..."""

    def test_non_super_admin_is_denied(self, api_client, co_admin, parent):
        api_client.force_authenticate(user=co_admin)

        response = api_client.get(f"/api/v1/access/users/{parent.id}/")

        assert response.status_code == 403
        assert response.data["detail"] == "Not permitted"

    def test_retrieve_user_access(self, admin_client, parent):
        ModuleAccessFactory(user=parent, module_name="Messages", access_type="edit")

        response = admin_client.get(f"/api/v1/access/users/{parent.id}/")

        assert response.status_code == 200
        assert response.data["access"] == {"Messages": "edit"}

    def test_retrieve_unknown_user_is_404(self, admin_client):
        assert admin_client.get("/api/v1/access/users/999999/").status_code == 404

    def test_save_access_map(self, admin_client, parent):
        response = admin_client.put(
            f"/api/v1/access/users/{parent.id}/",
            {"access": {"Dashboard": "view", "Attendance": "all", "Settings": "none"}},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["success"] is True
        assert AccessPolicyService.get_access_map(parent.id) == {
            "Dashboard": "view",
            "Attendance": "all",
        }

    def test_save_access_map_rejects_bad_level(self, admin_client, parent):
        response = admin_client.put(
            f"/api/v1/access/users/{parent.id}/",
            {"access": {"Dashboard": "owner"}},
            format="json",
        )

        assert response.status_code == 400

    def test_save_access_map_storage_failure_is_reported(self, admin_client, parent, mocker):
        ModuleAccessFactory(user=parent, module_name="Messages", access_type="edit")
        mocker.patch(
            "access.services.ModuleAccess.objects.bulk_create",
            side_effect=DatabaseError("insert failed"),
        )

        response = admin_client.put(
            f"/api/v1/access/users/{parent.id}/",
            {"access": {"Dashboard": "view"}},
            format="json",
        )

        assert response.status_code == 503
        assert response.data["success"] is False
        assert ModuleAccess.objects.filter(user=parent, module_name="Messages").exists()

    def test_upsert_grant(self, admin_client, parent):
        response = admin_client.post(
            f"/api/v1/access/users/{parent.id}/grants/",
            {"module_name": "Calendar", "access_type": "delete"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["data"]["access_type"] == "delete"
        assert response.data["data"]["sub_domain"] == "/dashboard/calendar"

    def test_remove_grant_with_space_in_module_name(self, admin_client, parent):
        ModuleAccessFactory(user=parent, module_name="My Courses")

        response = admin_client.delete(
            f"/api/v1/access/users/{parent.id}/grants/{quote('My Courses')}/"
        )

        assert response.status_code == 200
        assert response.data == {"success": True, "data": 1}
        assert not ModuleAccess.objects.filter(user=parent).exists()

    def test_grant_all_and_revoke_all(self, admin_client, parent):
        response = admin_client.post(f"/api/v1/access/users/{parent.id}/grant-all/", {}, format="json")

        assert response.status_code == 200
        assert len(response.data["data"]) == 14

        response = admin_client.post(f"/api/v1/access/users/{parent.id}/revoke-all/")

        assert response.status_code == 200
        assert response.data["data"] == []
        assert AccessPolicyService.get_access_map(parent.id) == {}

    def test_provision_defaults(self, admin_client, faculty):
        AccessPolicyService.revoke_all_access(faculty.id)

        response = admin_client.post(f"/api/v1/access/users/{faculty.id}/provision-defaults/")

        assert response.status_code == 200
        assert response.data == {"success": True, "data": 12}
        assert len(AccessPolicyService.get_access_map(faculty.id)) == 12
