"""
Base exception classes for application-wide error handling.

Every error the access and notification layers raise derives from
BaseApplicationError so views can translate them into one response shape.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed input (unknown event type, bad payload)
    ├── NotFoundError - Referenced principal or record does not exist
    ├── PermissionDeniedError - Authorization failures
    ├── StorageError - Persistence layer rejected or could not run a write
    ├── ConfigurationError - Required settings/credentials are missing
    └── ExternalServiceError - Third-party service failures (SMS gateways)

Usage:
    from core.exceptions import StorageError

    try:
        ModuleAccess.objects.bulk_create(rows)
    except DatabaseError as e:
        raise StorageError(
            "Could not save access grants",
            error_code="ACCESS_WRITE_FAILED",
            details={"user_id": user_id},
        ) from e

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "success": False,
                "error": "Could not save access grants",
                "error_code": "ACCESS_WRITE_FAILED",
                "details": {"user_id": 12}
            }
        """
        result: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    Example:
        raise ValidationError(
            "Invalid notification type",
            error_code="INVALID_EVENT_TYPE",
            details={"type": event_type},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """Raised when a requested resource is not found."""

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when a principal lacks permission for an operation.

    For authentication failures (missing/invalid token), use DRF's
    AuthenticationFailed. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"


class StorageError(BaseApplicationError):
    """
    Raised when a write to the database fails.

    Reads may degrade to an empty result; writes never do. Services raise
    this from the underlying DatabaseError so callers can surface
    {success: false, error} instead of silently losing a grant or a
    notification.
    """

    default_error_code: str = "STORAGE_ERROR"


class ConfigurationError(BaseApplicationError):
    """
    Raised when required configuration is missing or invalid.

    Detected once per operation (for example, before an SMS batch starts)
    rather than once per recipient.
    """

    default_error_code: str = "CONFIGURATION_ERROR"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for SMS gateway rejections, network timeouts and unexpected
    responses. Log the original error for debugging but don't expose
    internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
