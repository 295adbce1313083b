"""
Permission classes for module access control.

This module provides DRF permission classes:
- IsSuperAdmin: Only SUPER_ADMIN principals
- HasModuleAccess: Principal has the level a view declares for its module
- HasCronSecret: Request carries the shared scheduler secret

Views using HasModuleAccess declare the module they belong to and,
optionally, the action each viewset action needs:

    class AttendanceTriggerView(APIView):
        permission_classes = [IsAuthenticated, HasModuleAccess]
        access_module = "Attendance"
        access_action = "edit"

    class NotificationViewSet(viewsets.GenericViewSet):
        access_module = "Messages"
        access_actions = {"create": "edit"}

Without an explicit action the HTTP method decides: safe methods need
VIEW, POST/PUT/PATCH need EDIT, DELETE needs DELETE. A view that forgets
to declare access_module is denied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.utils.crypto import constant_time_compare
from rest_framework import permissions

from access.evaluator import can_perform_action, is_super_admin
from access.services import AccessPolicyService

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


METHOD_ACTIONS = {
    "GET": "view",
    "HEAD": "view",
    "OPTIONS": "view",
    "POST": "edit",
    "PUT": "edit",
    "PATCH": "edit",
    "DELETE": "delete",
}

DENIED_MESSAGE = "Not permitted"


class IsSuperAdmin(permissions.BasePermission):
    """Allows access only to SUPER_ADMIN principals."""

    message = DENIED_MESSAGE

    def has_permission(self, request: Request, view: APIView) -> bool:
        return is_super_admin(request.user)


class HasModuleAccess(permissions.BasePermission):
    """
    Allows access when the principal's level on view.access_module covers
    the required action.

    The access map is loaded once per request through the cached
    AccessPolicyService and evaluated by access.evaluator.
    """

    message = DENIED_MESSAGE

    def has_permission(self, request: Request, view: APIView) -> bool:
        module_name = getattr(view, "access_module", None)
        if not module_name:
            return False

        action = self._required_action(request, view)
        user = request.user
        access_map = AccessPolicyService.get_access_map(getattr(user, "id", None))
        return can_perform_action(user, module_name, action, access_map)

    @staticmethod
    def _required_action(request: Request, view: APIView) -> str:
        per_action = getattr(view, "access_actions", None) or {}
        view_action = getattr(view, "action", None)
        if view_action in per_action:
            return per_action[view_action]
        explicit = getattr(view, "access_action", None)
        if explicit:
            return explicit
        return METHOD_ACTIONS.get(request.method, "all")


class HasCronSecret(permissions.BasePermission):
    """
    Allows the external scheduler in with the X-Cron-Secret header.

    Always denies when NOTIFICATIONS_CRON_SECRET is empty.
    """

    message = DENIED_MESSAGE

    def has_permission(self, request: Request, view: APIView) -> bool:
        secret = getattr(settings, "NOTIFICATIONS_CRON_SECRET", "")
        provided = request.headers.get("X-Cron-Secret", "")
        return bool(secret) and bool(provided) and constant_time_compare(provided, secret)
