"""
Access evaluation.

Pure functions that decide what a principal may do on a module given the
principal's access map. Nothing here touches the database: callers load the
map once (AccessPolicyService.get_access_map) and reuse it for every check
in the request.

Rules:
    1. No principal (or an unauthenticated one) has no access.
    2. SUPER_ADMIN has ALL access to every module, even modules with no
       grant and modules missing from the catalog.
    3. Everyone else gets the level stored for the module; a missing entry
       or an unrecognized value is NONE.

Usage:
    from access.evaluator import can_edit, evaluate_access

    decision = evaluate_access(user, "Attendance", access_map)
    if decision.can_edit:
        ...

    if can_edit(user, "Attendance", access_map):
        ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from access.exceptions import AuthorizationDenied
from access.levels import ACTION_LEVELS, AccessLevel
from authentication.models import UserRole

AccessMap = Mapping[str, str]


@dataclass(frozen=True)
class Principal:
    """
    Lightweight principal for callers without a User instance
    (Celery tasks, scripts).
    """

    id: int | None
    role: str
    is_authenticated: bool = True


@dataclass(frozen=True)
class AccessDecision:
    """Everything a caller can ask about one (principal, module) pair."""

    level: AccessLevel
    can_view: bool
    can_edit: bool
    can_delete: bool
    has_full_access: bool

    @classmethod
    def from_level(cls, level: AccessLevel) -> AccessDecision:
        return cls(
            level=level,
            can_view=level >= AccessLevel.VIEW,
            can_edit=level >= AccessLevel.EDIT,
            can_delete=level >= AccessLevel.DELETE,
            has_full_access=level >= AccessLevel.ALL,
        )


def is_super_admin(principal: Any) -> bool:
    if principal is None or not getattr(principal, "is_authenticated", False):
        return False
    return getattr(principal, "role", None) == UserRole.SUPER_ADMIN


def get_access_level(principal: Any, module_name: str, access_map: AccessMap | None) -> AccessLevel:
    """
    Resolve the principal's effective level on a module.

    Args:
        principal: User, Principal, AnonymousUser or None
        module_name: Module key (exact, case-sensitive)
        access_map: {module_name: access_type} for this principal

    Returns:
        AccessLevel (NONE when nothing grants access)
    """
    if principal is None or not getattr(principal, "is_authenticated", False):
        return AccessLevel.NONE

    if is_super_admin(principal):
        return AccessLevel.ALL

    return AccessLevel.parse((access_map or {}).get(module_name))


def evaluate_access(principal: Any, module_name: str, access_map: AccessMap | None) -> AccessDecision:
    return AccessDecision.from_level(get_access_level(principal, module_name, access_map))


def has_module_access(principal: Any, module_name: str, access_map: AccessMap | None) -> bool:
    """True if the principal can at least view the module."""
    return get_access_level(principal, module_name, access_map) >= AccessLevel.VIEW


def can_edit(principal: Any, module_name: str, access_map: AccessMap | None) -> bool:
    return get_access_level(principal, module_name, access_map) >= AccessLevel.EDIT


def can_delete(principal: Any, module_name: str, access_map: AccessMap | None) -> bool:
    return get_access_level(principal, module_name, access_map) >= AccessLevel.DELETE


def has_full_access(principal: Any, module_name: str, access_map: AccessMap | None) -> bool:
    return get_access_level(principal, module_name, access_map) >= AccessLevel.ALL


def can_perform_action(
    principal: Any,
    module_name: str,
    action: str,
    access_map: AccessMap | None,
) -> bool:
    """
    Check a named action ("view", "edit", "delete", "all").

    Unknown actions are denied.
    """
    required = ACTION_LEVELS.get(action)
    if required is None:
        return False
    return get_access_level(principal, module_name, access_map) >= required


def require_access(
    principal: Any,
    module_name: str,
    action: str,
    access_map: AccessMap | None,
) -> None:
    """
    Raise AuthorizationDenied unless the principal may perform action.

    Raises:
        AuthorizationDenied: With a generic message
    """
    if not can_perform_action(principal, module_name, action, access_map):
        raise AuthorizationDenied(module_name=module_name, required=action)
