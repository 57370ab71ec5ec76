"""
Custom Exception Classes for CMS Fields

This module defines custom exceptions for field registration errors and
consistent error responses across the HTTP layer.
"""

from typing import Any

from fastapi import status


class FieldsException(Exception):
    """Base exception class for all field framework exceptions"""

    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Registration Exceptions
# ============================================================================


class ConfigurationError(FieldsException):
    """Raised when fields, groups or containers are registered incorrectly"""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details or {})


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(FieldsException):
    """Base class for resource not found errors"""

    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ContainerNotFoundError(ResourceNotFoundError):
    """Raised when a container is not registered"""

    error_code = "CONTAINER_NOT_FOUND"

    def __init__(self, container_id: Any | None = None):
        super().__init__(resource_type="Container", resource_id=container_id)
