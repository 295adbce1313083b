"""
Module catalog and role default access.

MODULE_CATALOG lists the dashboard modules the admin UI offers, with the
dashboard path stored as a grant's sub_domain. ROLE_DEFAULT_ACCESS is the
grant set a new principal receives for its role.

The role table is versioned data: bump ROLE_DEFAULTS_VERSION whenever it
changes. A deployment can replace it wholesale with the
ACCESS_ROLE_DEFAULTS setting. Roles without an entry (super_admin, parent,
b2c_student, b2c_mentor) get no grants.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

ROLE_DEFAULTS_VERSION = "2024.1"


@dataclass(frozen=True)
class ModuleDefinition:
    name: str
    path: str
    description: str


MODULE_CATALOG: tuple[ModuleDefinition, ...] = (
    ModuleDefinition("Dashboard", "/dashboard", "Main dashboard overview"),
    ModuleDefinition("My Courses", "/dashboard/courses", "Course management"),
    ModuleDefinition("AI Copilot", "/dashboard/copilot", "AI assistant features"),
    ModuleDefinition("Viva AI", "/dashboard/viva-ai", "Voice-based AI assistant"),
    ModuleDefinition("Assignments", "/dashboard/assignments", "Assignment management"),
    ModuleDefinition("Performance", "/dashboard/performance", "Performance analytics"),
    ModuleDefinition("Calendar", "/dashboard/calendar", "Event calendar"),
    ModuleDefinition("Messages", "/dashboard/messages", "Messaging system"),
    ModuleDefinition("User Management", "/dashboard/users", "Manage users"),
    ModuleDefinition("Student Management", "/dashboard/student-management", "Student records"),
    ModuleDefinition("Attendance", "/dashboard/attendance", "Attendance tracking"),
    ModuleDefinition("Settings", "/dashboard/settings", "System settings"),
    ModuleDefinition("Profile", "/dashboard/profile", "User profile"),
    ModuleDefinition("School Profile", "/dashboard/school-profile", "School information"),
)

_PATHS = {module.name: module.path for module in MODULE_CATALOG}


ROLE_DEFAULT_ACCESS: dict[str, dict[str, str]] = {
    "student": {
        "Dashboard": "view",
        "My Courses": "view",
        "AI Copilot": "all",
        "Viva AI": "all",
        "Assignments": "view",
        "Performance": "view",
        "Calendar": "view",
        "Messages": "all",
        "Profile": "edit",
    },
    "faculty": {
        "Dashboard": "view",
        "My Courses": "all",
        "AI Copilot": "all",
        "Viva AI": "all",
        "Assignments": "all",
        "Performance": "view",
        "Calendar": "all",
        "Messages": "all",
        "Student Management": "all",
        "Attendance": "all",
        "Profile": "edit",
        "School Profile": "view",
    },
    "co_admin": {
        "Dashboard": "all",
        "My Courses": "all",
        "AI Copilot": "all",
        "Viva AI": "all",
        "Assignments": "all",
        "Performance": "all",
        "Calendar": "all",
        "Messages": "all",
        "User Management": "view",
        "Student Management": "all",
        "Attendance": "all",
        "Settings": "edit",
        "Profile": "edit",
        "School Profile": "edit",
    },
}


def module_names() -> list[str]:
    return [module.name for module in MODULE_CATALOG]


def get_module_path(module_name: str) -> str | None:
    """Dashboard path for a catalog module, None for unknown modules."""
    return _PATHS.get(module_name)


def get_role_defaults(role: str) -> dict[str, str]:
    """
    Default {module_name: access_type} for a role.

    Uses settings.ACCESS_ROLE_DEFAULTS when it is set, the built-in table
    otherwise. Unknown roles get an empty dict.
    """
    table = getattr(settings, "ACCESS_ROLE_DEFAULTS", None) or ROLE_DEFAULT_ACCESS
    return dict(table.get(str(role), {}))
