"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

Repositories raise these, the application layer lets them pass through
(except for timeouts, which it raises itself), and the interfaces layer
maps them to HTTP status codes.
"""

from typing import Optional, Any


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """Storage failure: any driver/query error that is not 'not found'."""


class DatabaseConnectionException(RepositoryException):
    """Database unreachable (fatal at startup)."""


class ValidationException(ApplicationException):
    """Exception for malformed request input."""


class ConflictException(ApplicationException):
    """Exception when a write collides with existing data."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Any] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id is not None:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class OperationTimeoutException(ApplicationException):
    """Exception when an operation exceeds its deadline."""

    def __init__(
        self,
        operation: str,
        timeout: float,
        details: Optional[dict] = None
    ):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"{operation} timed out after {timeout}s",
            details or {"operation": operation, "timeout_seconds": timeout}
        )


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""
