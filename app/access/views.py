"""
Views for module access control.

Endpoints:
    GET    /api/v1/access/modules/                            - Module catalog
    GET    /api/v1/access/me/                                 - Caller's access
    GET    /api/v1/access/users/{id}/                         - User's access
    PUT    /api/v1/access/users/{id}/                         - Save full access map
    POST   /api/v1/access/users/{id}/grants/                  - Upsert one grant
    DELETE /api/v1/access/users/{id}/grants/{module_name}/    - Remove one grant
    POST   /api/v1/access/users/{id}/grant-all/               - Full access
    POST   /api/v1/access/users/{id}/revoke-all/              - Remove all access
    POST   /api/v1/access/users/{id}/provision-defaults/      - Apply role defaults

Everything under users/ is SUPER_ADMIN only. Writes answer with the
{success, data | error} envelope; a storage failure is a 503 with
success=false, never a silent 200.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from access.defaults import MODULE_CATALOG
from access.permissions import IsSuperAdmin
from access.serializers import (
    AccessMapSerializer,
    AccessSummarySerializer,
    GrantAllSerializer,
    GrantSerializer,
    ModuleAccessSerializer,
    ModuleDefinitionSerializer,
)
from access.services import AccessPolicyService, DefaultAccessProvisioner
from core.exceptions import StorageError
from core.services import ServiceResult


def _summary(user) -> dict:
    accessible = AccessPolicyService.get_accessible_modules(user)
    return {
        "user_id": user.id,
        "role": user.role,
        "is_super_admin": accessible["is_super_admin"],
        "access": AccessPolicyService.get_access_map(user.id),
        "modules": accessible["modules"],
    }


def _grants_response(result: ServiceResult) -> Response:
    if not result.success:
        code = status.HTTP_404_NOT_FOUND if result.error_code == "USER_NOT_FOUND" else status.HTTP_400_BAD_REQUEST
        return Response(result.to_response(), status=code)
    return Response(
        {"success": True, "data": ModuleAccessSerializer(result.data, many=True).data}
    )


class ModuleCatalogView(APIView):
    """List the dashboard modules access can be granted on."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_access_modules",
        summary="List modules",
        responses={200: ModuleDefinitionSerializer(many=True)},
        tags=["Access"],
    )
    def get(self, request):
        return Response(ModuleDefinitionSerializer(MODULE_CATALOG, many=True).data)


class MyAccessView(APIView):
    """The caller's own access map and navigable modules."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_my_access",
        summary="Get my access",
        responses={200: AccessSummarySerializer},
        tags=["Access"],
    )
    def get(self, request):
        return Response(AccessSummarySerializer(_summary(request.user)).data)


@extend_schema_view(
    retrieve=extend_schema(
        operation_id="get_user_access",
        summary="Get a user's access",
        responses={200: AccessSummarySerializer},
        tags=["Access - Admin"],
    ),
    update=extend_schema(
        operation_id="save_user_access",
        summary="Save a user's access map",
        description=(
            "Replace every grant of the user. 'none' entries are dropped. "
            "All-or-nothing: on failure the previous grants are kept."
        ),
        request=AccessMapSerializer,
        responses={
            200: ModuleAccessSerializer(many=True),
            503: OpenApiResponse(description="Storage unavailable; nothing changed"),
        },
        tags=["Access - Admin"],
    ),
)
class UserAccessViewSet(viewsets.ViewSet):
    """
    Administrative management of another user's module access.

    Permissions:
    - Authenticated SUPER_ADMIN only
    """

    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def _get_user(self, pk):
        return get_object_or_404(get_user_model(), pk=pk)

    def retrieve(self, request, pk=None):
        user = self._get_user(pk)
        return Response(AccessSummarySerializer(_summary(user)).data)

    def update(self, request, pk=None):
        user = self._get_user(pk)
        serializer = AccessMapSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = AccessPolicyService.save_access_map(
                user.id, serializer.validated_data["access"]
            )
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return _grants_response(result)

    @extend_schema(
        operation_id="upsert_user_grant",
        summary="Set one module grant",
        request=GrantSerializer,
        responses={200: ModuleAccessSerializer},
        tags=["Access - Admin"],
    )
    @action(detail=True, methods=["post"])
    def grants(self, request, pk=None):
        user = self._get_user(pk)
        serializer = GrantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = AccessPolicyService.upsert_access(
                user.id,
                data["module_name"],
                data["access_type"],
                sub_domain=data.get("sub_domain") or None,
            )
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)
        return Response({"success": True, "data": ModuleAccessSerializer(result.data).data})

    @extend_schema(
        operation_id="remove_user_grant",
        summary="Remove one module grant",
        responses={200: OpenApiResponse(description="{success, data: deleted_count}")},
        tags=["Access - Admin"],
    )
    @action(
        detail=True,
        methods=["delete"],
        url_path=r"grants/(?P<module_name>[^/]+)",
        url_name="remove-grant",
    )
    def remove_grant(self, request, pk=None, module_name=None):
        user = self._get_user(pk)
        try:
            result = AccessPolicyService.remove_access(user.id, module_name)
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(result.to_response())

    @extend_schema(
        operation_id="grant_user_full_access",
        summary="Grant full access",
        request=GrantAllSerializer,
        responses={200: ModuleAccessSerializer(many=True)},
        tags=["Access - Admin"],
    )
    @action(detail=True, methods=["post"], url_path="grant-all")
    def grant_all(self, request, pk=None):
        user = self._get_user(pk)
        serializer = GrantAllSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = AccessPolicyService.grant_full_access(
                user.id, serializer.validated_data.get("modules")
            )
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return _grants_response(result)

    @extend_schema(
        operation_id="revoke_user_access",
        summary="Revoke all access",
        request=None,
        responses={200: ModuleAccessSerializer(many=True)},
        tags=["Access - Admin"],
    )
    @action(detail=True, methods=["post"], url_path="revoke-all")
    def revoke_all(self, request, pk=None):
        user = self._get_user(pk)
        try:
            result = AccessPolicyService.revoke_all_access(user.id)
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return _grants_response(result)

    @extend_schema(
        operation_id="provision_user_defaults",
        summary="Apply role default access",
        description="Adds the role's default grants for modules the user has no grant on.",
        request=None,
        responses={200: OpenApiResponse(description="{success, data: grants_requested}")},
        tags=["Access - Admin"],
    )
    @action(detail=True, methods=["post"], url_path="provision-defaults")
    def provision_defaults(self, request, pk=None):
        user = self._get_user(pk)
        try:
            result = DefaultAccessProvisioner.provision_defaults(user.id, user.role)
        except StorageError as e:
            return Response(e.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(result.to_response())
