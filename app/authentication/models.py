"""
Authentication models.

This module defines the principal model used by every access decision:
- UserRole: Fixed set of principal roles
- User: Custom user model with email-based authentication and a role

Related files:
    - managers.py: Custom user manager for email-based creation
    - signals.py: Provision role default access on user creation

Security:
    - User passwords hashed with Django's PBKDF2
    - Only SUPER_ADMIN bypasses module grants (see access.evaluator)
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """
    Principal roles.

    Roles are fixed at creation time. SUPER_ADMIN is the only role that
    bypasses per-module grants; every other role is evaluated against its
    stored access map.
    """

    SUPER_ADMIN = "super_admin", "Super Admin"
    CO_ADMIN = "co_admin", "Co-Admin"
    FACULTY = "faculty", "Faculty"
    STUDENT = "student", "Student"
    PARENT = "parent", "Parent"
    B2C_STUDENT = "b2c_student", "B2C Student"
    B2C_MENTOR = "b2c_mentor", "B2C Mentor"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        full_name: Display name
        phone: Contact number (free-form; normalized when used for SMS)
        role: One of UserRole
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        teacher = User.objects.create_user(
            email="teacher@example.com",
            password="securepassword",
            role=UserRole.FACULTY,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    full_name = models.CharField(
        max_length=255,
        blank=True,
        help_text="User's display name",
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text="Contact phone number",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.STUDENT,
        db_index=True,
        help_text="Principal role; drives default module access",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return self.full_name.split(" ")[0] if self.full_name else self.email.split("@")[0]

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN
