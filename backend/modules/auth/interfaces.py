"""
Authentication module interface.

Other modules should depend on ITokenService, not the concrete implementation.
This keeps the accounts module and the API gate testable with fakes.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser, Role

from .models import SideToken


@runtime_checkable
class ITokenService(Protocol):
    """
    Interface for session and side-token operations.

    Session tokens are stateless and self-verifying. Side tokens are opaque
    random strings whose single-use semantics are enforced by whoever
    stores them.
    """

    def issue_session(self, subject_id: str, role: Role) -> str:
        """
        Issue a signed session token.

        Args:
            subject_id: Account record ID
            role: Role to embed in the claims

        Returns:
            Encoded token string valid for the configured session TTL
        """
        ...

    def verify_session(self, token: str) -> AuthenticatedUser:
        """
        Verify a session token and return the authenticated caller.

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If the token is past its expiry
            InvalidTokenError: If signature or payload is invalid
        """
        ...

    def issue_reset_token(self) -> SideToken:
        """Issue a password-reset token with an absolute expiry."""
        ...

    def issue_verification_token(self) -> SideToken:
        """Issue an email-verification token."""
        ...
