"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries. Every failure carries a
machine-readable ``code`` so callers can branch without parsing messages.
"""

from typing import Optional, Any, List
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class FieldError:
    """A single field-level rule violation."""
    field: str
    message: str
    provided_value: Optional[Any] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


class ApplicationException(Exception):
    """Base exception for all application errors."""

    code: str = "APPLICATION_ERROR"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """Raised when the underlying entity store call itself fails."""

    code = "STORE_UNAVAILABLE"


class ValidationException(ApplicationException):
    """
    Exception for validation errors.

    Carries every violated field so callers never have to assume a
    single-error response.
    """

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
        details: Optional[dict] = None
    ):
        self.code = code
        self.errors = list(errors or [])
        super().__init__(message or code, details)

    @property
    def field(self) -> Optional[str]:
        """Field of the first violation, if any."""
        return self.errors[0].field if self.errors else None

    @property
    def provided_value(self) -> Optional[Any]:
        """Rejected value of the first violation, if any."""
        return self.errors[0].provided_value if self.errors else None


class ConflictException(ApplicationException):
    """Uniqueness or dependency constraint violation."""

    def __init__(self, code: str, message: str, details: Optional[dict] = None):
        self.code = code
        super().__init__(message, details)


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        code: str = "RESOURCE_NOT_FOUND",
        message: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.code = code
        self.resource_type = resource_type
        self.resource_id = resource_id
        if message is None:
            message = f"{resource_type}"
            if resource_id:
                message += f" with id '{resource_id}'"
            message += " was not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""

    code = "CONFIGURATION_ERROR"
