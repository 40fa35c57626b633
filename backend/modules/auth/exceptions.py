"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import AuthenticationError, ValidationError


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidSideTokenError(ValidationError):
    """
    Raised when a reset or verification token cannot be redeemed.

    Covers unknown, expired and already-consumed tokens alike; the
    caller is never told which.
    """

    def __init__(self, purpose: str):
        super().__init__(
            f"Invalid or expired {purpose} token",
            code="INVALID_TOKEN",
            details={"purpose": purpose},
        )
