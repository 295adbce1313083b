"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (access, notifications,
schools). No business logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError, NotFoundError, PermissionDeniedError
    - StorageError: Failed database writes
    - ConfigurationError: Missing settings or credentials
    - ExternalServiceError: Third-party service failures

Note:
    Models are NOT imported here to avoid AppRegistryNotReady errors.
    Import them directly from core.models.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "StorageError",
    "ConfigurationError",
    "ExternalServiceError",
]
