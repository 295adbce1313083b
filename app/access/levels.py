"""
Access levels and actions.

A single total order drives every access check:

    NONE < VIEW < EDIT < DELETE < ALL

Each level implies every level below it, so DELETE access also allows
viewing and editing. Stored values are the lowercase names
("none", "view", ...); anything unrecognized reads as NONE.
"""

from __future__ import annotations

from enum import IntEnum

from django.db import models


class AccessType(models.TextChoices):
    """Stored representation of an access level."""

    NONE = "none", "No Access"
    VIEW = "view", "View Only"
    EDIT = "edit", "Edit"
    DELETE = "delete", "Delete"
    ALL = "all", "Full Access"


class AccessLevel(IntEnum):
    """
    Ordered access levels.

    Higher values include all lower permissions, so checks are plain
    comparisons:

        if level >= AccessLevel.EDIT:
            ...
    """

    NONE = 0
    VIEW = 1
    EDIT = 2
    DELETE = 3
    ALL = 4

    @property
    def access_type(self) -> str:
        """Stored string form ("none", "view", ...)."""
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> AccessLevel:
        """
        Convert a stored or user-supplied value to a level.

        Missing, malformed or unknown values are NONE.

        Example:
            AccessLevel.parse("edit")    # AccessLevel.EDIT
            AccessLevel.parse(" ALL ")   # AccessLevel.ALL
            AccessLevel.parse("admin")   # AccessLevel.NONE
            AccessLevel.parse(None)      # AccessLevel.NONE
        """
        if isinstance(value, AccessLevel):
            return value
        if not isinstance(value, str):
            return cls.NONE
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return cls.NONE

    @classmethod
    def is_valid(cls, value) -> bool:
        """True if value names a level exactly (used to validate writes)."""
        return isinstance(value, str) and value in AccessType.values


# Action names accepted by can_perform_action and the minimum level each needs
ACTION_LEVELS: dict[str, AccessLevel] = {
    "view": AccessLevel.VIEW,
    "edit": AccessLevel.EDIT,
    "delete": AccessLevel.DELETE,
    "all": AccessLevel.ALL,
}
