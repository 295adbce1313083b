"""
Access models.

ModuleAccess stores one grant per (user, module). The unique constraint is
what makes upserts and bulk replaces safe: two concurrent upserts for the
same pair resolve to a single row.
"""

from django.conf import settings
from django.db import models

from access.levels import AccessLevel, AccessType
from core.models import BaseModel


class ModuleAccess(BaseModel):
    """
    A principal's access level on one dashboard module.

    Fields:
        user: Principal the grant belongs to
        module_name: Module key (e.g. "Attendance"); not validated against the catalog
        access_type: none/view/edit/delete/all
        sub_domain: Dashboard path the module lives under (informational)
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="module_access",
    )
    module_name = models.CharField(
        max_length=100,
        help_text="Module key, e.g. 'Attendance'",
    )
    access_type = models.CharField(
        max_length=10,
        choices=AccessType.choices,
        default=AccessType.NONE,
    )
    sub_domain = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Dashboard path, e.g. '/dashboard/attendance'",
    )

    class Meta:
        db_table = "access_module_access"
        verbose_name = "module access"
        verbose_name_plural = "module access"
        ordering = ["module_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "module_name"],
                name="unique_module_access_per_user",
            ),
        ]

    def __str__(self):
        return f"{self.user_id}:{self.module_name}={self.access_type}"

    @property
    def level(self) -> AccessLevel:
        return AccessLevel.parse(self.access_type)
