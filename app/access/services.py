"""
Access policy services.

This module provides:
- AccessPolicyService: Read, upsert, remove and replace module grants
- DefaultAccessProvisioner: Apply a role's default grants to a new principal

Reads and writes fail differently on purpose. A failed read returns an
empty access map, which the evaluator treats as "no access"; the request
is denied rather than errored. A failed write raises StorageError and is
never reported as success.

Access maps are cached per user (ACCESS_MAP_CACHE_TTL seconds) and the
cached entry is dropped after every write for that user.

Usage:
    from access.services import AccessGrant, AccessPolicyService

    access_map = AccessPolicyService.get_access_map(user.id)

    AccessPolicyService.upsert_access(user.id, "Calendar", "edit")

    AccessPolicyService.bulk_replace_access(
        user.id,
        [AccessGrant("Dashboard", "view"), AccessGrant("Attendance", "all")],
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError

from access.defaults import MODULE_CATALOG, get_module_path, get_role_defaults, module_names
from access.evaluator import can_perform_action, is_super_admin
from access.levels import AccessLevel, AccessType
from access.models import ModuleAccess
from core.exceptions import StorageError
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.models import User


ACCESS_MAP_CACHE_PREFIX = "module_access"


@dataclass(frozen=True)
class AccessGrant:
    """One requested grant in a bulk write."""

    module_name: str
    access_type: str
    sub_domain: str | None = None

    @classmethod
    def coerce(cls, value: AccessGrant | Mapping[str, Any]) -> AccessGrant:
        if isinstance(value, AccessGrant):
            return value
        return cls(
            module_name=value.get("module_name", ""),
            access_type=value.get("access_type", ""),
            sub_domain=value.get("sub_domain"),
        )


class AccessPolicyService(BaseService):
    """
    Persistent per-principal module grants.

    One row per (user, module); upsert semantics on write. Bulk replace is
    all-or-nothing: a failed insert rolls back the delete.
    """

    @classmethod
    def _cache_key(cls, user_id) -> str:
        return f"{ACCESS_MAP_CACHE_PREFIX}:{user_id}"

    @classmethod
    def invalidate(cls, user_id) -> None:
        """Drop the cached access map for a user."""
        cache.delete(cls._cache_key(user_id))

    @classmethod
    def _user_exists(cls, user_id) -> bool:
        return get_user_model().objects.filter(id=user_id).exists()

    @classmethod
    def _invalid_grants(cls, grants: list[AccessGrant]) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        for grant in grants:
            if not grant.module_name or not str(grant.module_name).strip():
                errors.setdefault("module_name", []).append("Module name is required.")
            if not AccessLevel.is_valid(grant.access_type):
                errors.setdefault(grant.module_name or "access_type", []).append(
                    f"Invalid access type '{grant.access_type}'."
                )
        return errors

    # =========================================================================
    # Reads
    # =========================================================================

    @classmethod
    def get_access_map(cls, user_id) -> dict[str, str]:
        """
        Return {module_name: access_type} for a user.

        Returns an empty map for unknown users and when the database is
        unavailable (logged, not raised, and not cached).
        """
        if user_id is None:
            return {}

        key = cls._cache_key(user_id)
        cached = cache.get(key)
        if cached is not None:
            return dict(cached)

        try:
            access_map = dict(
                ModuleAccess.objects.filter(user_id=user_id).values_list(
                    "module_name", "access_type"
                )
            )
        except DatabaseError:
            cls.get_logger().error(
                f"Failed to load access map for user {user_id}; treating as no access",
                exc_info=True,
            )
            return {}

        cache.set(key, access_map, timeout=settings.ACCESS_MAP_CACHE_TTL)
        return access_map

    @classmethod
    def list_grants(cls, user_id) -> list[ModuleAccess]:
        return list(ModuleAccess.objects.filter(user_id=user_id))

    @classmethod
    def get_accessible_modules(cls, user: User) -> dict[str, Any]:
        """
        Modules the user can open, for building navigation.

        Super admins get the whole catalog at ALL. Everyone else gets their
        stored grants minus NONE entries.

        Returns:
            {"is_super_admin": bool, "modules": [{module_name, access_type, sub_domain}]}
        """
        if is_super_admin(user):
            return {
                "is_super_admin": True,
                "modules": [
                    {
                        "module_name": module.name,
                        "access_type": AccessType.ALL.value,
                        "sub_domain": module.path,
                    }
                    for module in MODULE_CATALOG
                ],
            }

        try:
            modules = list(
                ModuleAccess.objects.filter(user_id=user.id)
                .exclude(access_type=AccessType.NONE)
                .values("module_name", "access_type", "sub_domain")
            )
        except DatabaseError:
            cls.get_logger().error(
                f"Failed to load accessible modules for user {user.id}",
                exc_info=True,
            )
            modules = []

        return {"is_super_admin": False, "modules": modules}

    @classmethod
    def check_user_access(cls, user_id, module_name: str, required: str = "view") -> bool:
        """
        Load a principal by id and check one action on one module.

        Unknown users are denied.
        """
        user = get_user_model().objects.filter(id=user_id).first()
        if user is None:
            return False
        return can_perform_action(user, module_name, required, cls.get_access_map(user.id))

    # =========================================================================
    # Writes
    # =========================================================================

    @classmethod
    def upsert_access(
        cls,
        user_id,
        module_name: str,
        access_type: str,
        sub_domain: str | None = None,
    ) -> ServiceResult[ModuleAccess]:
        """
        Create or update the grant for (user, module).

        Args:
            user_id: Principal to grant
            module_name: Module key
            access_type: none/view/edit/delete/all
            sub_domain: Dashboard path; defaults to the catalog path

        Returns:
            ServiceResult with the saved ModuleAccess

        Raises:
            StorageError: If the database rejects the write
        """
        grant = AccessGrant(module_name, access_type, sub_domain)
        errors = cls._invalid_grants([grant])
        if errors:
            return ServiceResult.failure(
                "Invalid access grant",
                error_code="INVALID_ACCESS_GRANT",
                errors=errors,
            )
        if not cls._user_exists(user_id):
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")

        try:
            with cls.atomic():
                access, _ = ModuleAccess.objects.update_or_create(
                    user_id=user_id,
                    module_name=module_name,
                    defaults={
                        "access_type": access_type,
                        "sub_domain": sub_domain or get_module_path(module_name),
                    },
                )
        except DatabaseError as e:
            cls.get_logger().error(
                f"Failed to save {module_name} access for user {user_id}", exc_info=True
            )
            raise StorageError(
                "Could not save access grant",
                error_code="ACCESS_WRITE_FAILED",
                details={"user_id": user_id, "module_name": module_name},
            ) from e

        cls.invalidate(user_id)
        cls.get_logger().info(f"Set {module_name}={access_type} for user {user_id}")
        return ServiceResult.success(access)

    @classmethod
    def remove_access(cls, user_id, module_name: str) -> ServiceResult[int]:
        """
        Delete the grant for (user, module). Removing a missing grant is a no-op.

        Returns:
            ServiceResult with the number of rows deleted (0 or 1)
        """
        try:
            deleted, _ = ModuleAccess.objects.filter(
                user_id=user_id, module_name=module_name
            ).delete()
        except DatabaseError as e:
            cls.get_logger().error(
                f"Failed to remove {module_name} access for user {user_id}", exc_info=True
            )
            raise StorageError(
                "Could not remove access grant",
                error_code="ACCESS_WRITE_FAILED",
                details={"user_id": user_id, "module_name": module_name},
            ) from e

        cls.invalidate(user_id)
        cls.get_logger().info(f"Removed {module_name} access for user {user_id}")
        return ServiceResult.success(deleted)

    @classmethod
    def bulk_replace_access(
        cls,
        user_id,
        grants: Iterable[AccessGrant | Mapping[str, Any]],
    ) -> ServiceResult[list[ModuleAccess]]:
        """
        Replace every grant of a user in one transaction.

        Duplicate module names keep the last entry. The grant set is
        validated before anything is deleted; on a database failure the
        previous grants survive.

        Returns:
            ServiceResult with the new ModuleAccess rows

        Raises:
            StorageError: If the delete or insert fails (nothing is changed)
        """
        requested = [AccessGrant.coerce(g) for g in grants]
        errors = cls._invalid_grants(requested)
        if errors:
            return ServiceResult.failure(
                "Invalid access grants",
                error_code="INVALID_ACCESS_GRANT",
                errors=errors,
            )
        if not cls._user_exists(user_id):
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")

        by_module = {grant.module_name: grant for grant in requested}
        rows = [
            ModuleAccess(
                user_id=user_id,
                module_name=grant.module_name,
                access_type=grant.access_type,
                sub_domain=grant.sub_domain or get_module_path(grant.module_name),
            )
            for grant in by_module.values()
        ]

        try:
            with cls.atomic():
                ModuleAccess.objects.filter(user_id=user_id).delete()
                created = ModuleAccess.objects.bulk_create(rows)
        except DatabaseError as e:
            cls.get_logger().error(
                f"Failed to replace access for user {user_id}; previous grants kept",
                exc_info=True,
            )
            raise StorageError(
                "Could not replace access grants",
                error_code="ACCESS_WRITE_FAILED",
                details={"user_id": user_id},
            ) from e

        cls.invalidate(user_id)
        cls.get_logger().info(f"Replaced access for user {user_id} with {len(created)} grants")
        return ServiceResult.success(created)

    @classmethod
    def save_access_map(cls, user_id, access_map: Mapping[str, str]) -> ServiceResult[list[ModuleAccess]]:
        """
        Save a full {module_name: access_type} map from the admin screen.

        NONE entries are not stored (absence already means NONE).
        """
        grants = [
            AccessGrant(module_name, access_type)
            for module_name, access_type in access_map.items()
            if access_type != AccessType.NONE
        ]
        return cls.bulk_replace_access(user_id, grants)

    @classmethod
    def grant_full_access(
        cls,
        user_id,
        modules: Iterable[str] | None = None,
    ) -> ServiceResult[list[ModuleAccess]]:
        """Replace the user's grants with ALL on each module (default: the whole catalog)."""
        names = list(modules) if modules is not None else module_names()
        return cls.bulk_replace_access(
            user_id, [AccessGrant(name, AccessType.ALL.value) for name in names]
        )

    @classmethod
    def revoke_all_access(cls, user_id) -> ServiceResult[list[ModuleAccess]]:
        """Remove every grant for the user."""
        return cls.bulk_replace_access(user_id, [])


class DefaultAccessProvisioner(BaseService):
    """
    Grants a role's default access to a principal.

    Runs automatically when a user is created (authentication.signals) and
    on demand from the admin API. Existing grants are never overwritten, so
    re-running it only fills in modules the user has no row for.
    """

    @classmethod
    def provision_defaults(
        cls,
        user_id,
        role: str,
        table: Mapping[str, str] | None = None,
    ) -> ServiceResult[int]:
        """
        Insert the role's default grants in one statement.

        Args:
            user_id: Principal to provision
            role: Principal role
            table: Optional {module_name: access_type} overriding the role table

        Returns:
            ServiceResult with the number of grants requested (0 for roles
            with no defaults, in which case nothing is written)

        Raises:
            StorageError: If the insert fails
        """
        defaults = dict(table) if table is not None else get_role_defaults(role)
        if not defaults:
            return ServiceResult.success(0)

        rows = [
            ModuleAccess(
                user_id=user_id,
                module_name=module_name,
                access_type=access_type,
                sub_domain=get_module_path(module_name),
            )
            for module_name, access_type in defaults.items()
        ]

        try:
            ModuleAccess.objects.bulk_create(rows, ignore_conflicts=True)
        except DatabaseError as e:
            cls.get_logger().error(
                f"Failed to provision default access for user {user_id} ({role})",
                exc_info=True,
            )
            raise StorageError(
                "Could not provision default access",
                error_code="ACCESS_PROVISION_FAILED",
                details={"user_id": user_id, "role": str(role)},
            ) from e

        AccessPolicyService.invalidate(user_id)
        cls.get_logger().info(
            f"Provisioned {len(rows)} default grants for user {user_id} ({role})"
        )
        return ServiceResult.success(len(rows))
