"""
Token service implementation.

Issues and verifies HS256-signed session tokens and generates the opaque
side tokens used by password reset and email verification.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
import pydantic

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser, Role

from .interfaces import ITokenService
from .models import SessionClaims, SideToken
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

# 32 random bytes, hex-encoded to 64 characters
SIDE_TOKEN_BYTES = 32

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_side_token() -> str:
    """
    Generate an opaque single-use token.

    Uniqueness is probabilistic (256 bits of entropy) and is not re-checked
    against stored tokens.
    """
    return secrets.token_hex(SIDE_TOKEN_BYTES)


class TokenService(ITokenService):
    """
    Implementation of the token service.

    Session tokens are stateless: validity depends only on the signature and
    the `exp` claim. There is no server-side revocation list, so a role
    change is only reflected in new tokens.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ):
        self._settings = settings or get_settings()
        self._clock = clock
        if not self._settings.jwt_secret:
            raise RuntimeError(
                "Session signing secret missing. Set the JWT_SECRET environment variable."
            )

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self._settings.session_ttl_days)

    def issue_session(self, subject_id: str, role: Role) -> str:
        """Sign `{sub, role, iat, exp}` with the server secret."""
        issued_at = self._clock()
        claims = SessionClaims(
            sub=subject_id,
            role=role,
            iat=int(issued_at.timestamp()),
            exp=int((issued_at + self.session_ttl).timestamp()),
        )
        return jwt.encode(
            claims.model_dump(mode="json"),
            self._settings.jwt_secret,
            algorithm=self._settings.jwt_algorithm,
        )

    def verify_session(self, token: str) -> AuthenticatedUser:
        """
        Verify a session token and return the authenticated caller.

        Expiry is enforced by PyJWT against the wall clock with no leeway.
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            claims = SessionClaims(**payload)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))
        except pydantic.ValidationError:
            raise InvalidTokenError("Malformed token claims")

        return AuthenticatedUser(id=claims.sub, role=claims.role)

    def issue_reset_token(self) -> SideToken:
        """Reset tokens expire a fixed time after issuance (not sliding)."""
        ttl = timedelta(minutes=self._settings.reset_token_ttl_minutes)
        return SideToken(token=generate_side_token(), expires_at=self._clock() + ttl)

    def issue_verification_token(self) -> SideToken:
        """A TTL of zero or less issues a token that never expires."""
        hours = self._settings.verification_token_ttl_hours
        expires_at = self._clock() + timedelta(hours=hours) if hours > 0 else None
        return SideToken(token=generate_side_token(), expires_at=expires_at)


# Module-level instance getter
_service_instance: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get the token service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = TokenService()
    return _service_instance


def reset_token_service() -> None:
    """Reset the token service singleton (for testing)."""
    global _service_instance
    _service_instance = None
