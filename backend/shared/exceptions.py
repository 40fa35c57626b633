"""
Base exception classes for the Pinnacle Metals backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code, so picking the
right base is what decides how an error reaches the client.
"""

from typing import Optional, Any


class PinnacleError(Exception):
    """
    Base exception for all Pinnacle errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(PinnacleError):
    """Resource not found."""

    pass


class ValidationError(PinnacleError):
    """Input validation failed."""

    pass


class ConflictError(PinnacleError):
    """Resource already exists or conflicts with existing state."""

    pass


class AuthenticationError(PinnacleError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(PinnacleError):
    """Authorization failed (insufficient permissions)."""

    pass


class ResourceExhaustedError(PinnacleError):
    """A bounded internal resource (retries, identifiers) ran out."""

    pass


class ExternalServiceError(PinnacleError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
