"""
Tests for access.levels and access.evaluator.

The evaluator is pure: these tests build access maps by hand and never
touch the database, except where a real User is the principal.
"""

import pytest
from django.contrib.auth.models import AnonymousUser

from access.evaluator import (
    AccessDecision,
    Principal,
    can_delete,
    can_edit,
    can_perform_action,
    evaluate_access,
    get_access_level,
    has_full_access,
    has_module_access,
    require_access,
)
from access.exceptions import AuthorizationDenied
from access.levels import AccessLevel

FACULTY = Principal(id=1, role="faculty")
SUPER_ADMIN = Principal(id=2, role="super_admin")


class TestAccessLevelParse:
    """AccessLevel.parse()"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("none", AccessLevel.NONE),
            ("view", AccessLevel.VIEW),
            ("edit", AccessLevel.EDIT),
            ("delete", AccessLevel.DELETE),
            ("all", AccessLevel.ALL),
            (" Edit ", AccessLevel.EDIT),
        ],
    )
    def test_parses_known_values(self, value, expected):
        assert AccessLevel.parse(value) == expected

    @pytest.mark.parametrize("value", [None, "", "admin", "owner", 3, ["view"]])
    def test_unknown_values_are_none(self, value):
        assert AccessLevel.parse(value) == AccessLevel.NONE

    def test_levels_are_totally_ordered(self):
        assert (
            AccessLevel.NONE
            < AccessLevel.VIEW
            < AccessLevel.EDIT
            < AccessLevel.DELETE
            < AccessLevel.ALL
        )

    def test_access_type_round_trips_to_stored_value(self):
        assert AccessLevel.DELETE.access_type == "delete"


class TestEvaluateAccess:
    """evaluate_access() and the boolean helpers."""

    def test_view_grant_allows_view_only(self):
        access_map = {"Calendar": "view"}

        decision = evaluate_access(FACULTY, "Calendar", access_map)

        assert decision == AccessDecision(
            level=AccessLevel.VIEW,
            can_view=True,
            can_edit=False,
            can_delete=False,
            has_full_access=False,
        )

    def test_edit_grant_denies_delete(self):
        access_map = {"Calendar": "edit"}

        assert can_edit(FACULTY, "Calendar", access_map) is True
        assert can_delete(FACULTY, "Calendar", access_map) is False

    def test_delete_grant_implies_view_and_edit(self):
        access_map = {"Calendar": "delete"}

        decision = evaluate_access(FACULTY, "Calendar", access_map)

        assert decision.can_view is True
        assert decision.can_edit is True
        assert decision.can_delete is True
        assert decision.has_full_access is False

    def test_all_grant_implies_everything(self):
        decision = evaluate_access(FACULTY, "Calendar", {"Calendar": "all"})

        assert decision.can_view and decision.can_edit and decision.can_delete
        assert decision.has_full_access is True

    def test_missing_module_is_no_access(self):
        access_map = {"Calendar": "all"}

        assert has_module_access(FACULTY, "Attendance", access_map) is False
        assert get_access_level(FACULTY, "Attendance", access_map) == AccessLevel.NONE

    def test_explicit_none_is_no_access(self):
        assert has_module_access(FACULTY, "Calendar", {"Calendar": "none"}) is False

    def test_malformed_value_is_no_access(self):
        assert has_module_access(FACULTY, "Calendar", {"Calendar": "superuser"}) is False

    def test_module_names_are_case_sensitive(self):
        assert has_module_access(FACULTY, "calendar", {"Calendar": "all"}) is False

    def test_empty_and_missing_map_deny(self):
        assert has_module_access(FACULTY, "Calendar", {}) is False
        assert has_module_access(FACULTY, "Calendar", None) is False

    def test_super_admin_has_full_access_without_grants(self):
        assert has_full_access(SUPER_ADMIN, "Calendar", {}) is True

    def test_super_admin_bypass_covers_unknown_modules(self):
        decision = evaluate_access(SUPER_ADMIN, "Not A Module", {"Not A Module": "none"})

        assert decision.level == AccessLevel.ALL
        assert decision.can_delete is True

    def test_no_principal_has_no_access(self):
        assert get_access_level(None, "Calendar", {"Calendar": "all"}) == AccessLevel.NONE

    def test_anonymous_user_has_no_access(self):
        assert has_module_access(AnonymousUser(), "Calendar", {"Calendar": "all"}) is False

    def test_real_user_principal(self, db):
        from authentication.tests.factories import SuperAdminFactory, UserFactory

        assert has_full_access(SuperAdminFactory(), "Settings", {}) is True
        assert has_module_access(UserFactory(), "Settings", {}) is False


class TestCanPerformAction:
    """can_perform_action() and require_access()"""

    @pytest.mark.parametrize(
        "action,expected",
        [("view", True), ("edit", True), ("delete", False), ("all", False)],
    )
    def test_actions_against_edit_grant(self, action, expected):
        assert can_perform_action(FACULTY, "Assignments", action, {"Assignments": "edit"}) is expected

    def test_unknown_action_is_denied(self):
        assert can_perform_action(FACULTY, "Assignments", "publish", {"Assignments": "all"}) is False

    def test_require_access_raises_with_generic_message(self):
        with pytest.raises(AuthorizationDenied) as exc_info:
            require_access(FACULTY, "Settings", "edit", {"Settings": "view"})

        assert exc_info.value.message == "Not permitted"
        assert exc_info.value.to_dict() == {
            "success": False,
            "error": "Not permitted",
            "error_code": "AUTHORIZATION_DENIED",
        }

    def test_require_access_passes_when_allowed(self):
        require_access(FACULTY, "Settings", "edit", {"Settings": "all"})
