"""
Authentication module.

Handles session token issuance/validation, side tokens for out-of-band
flows, and locating credentials on incoming requests.

Public API:
- ITokenService: Interface for token operations
- SessionClaims: Decoded session token payload
- SideToken: Reset / verification token with optional expiry
- Credential extractors: cookie, bearer header, query string
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import ITokenService
from .models import SessionClaims, SideToken
from .extractors import (
    CredentialExtractor,
    CookieExtractor,
    BearerHeaderExtractor,
    QueryParamExtractor,
    default_extractors,
    extract_credential,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidSideTokenError,
)

__all__ = [
    # Interface
    "ITokenService",
    # Models
    "SessionClaims",
    "SideToken",
    # Extractors
    "CredentialExtractor",
    "CookieExtractor",
    "BearerHeaderExtractor",
    "QueryParamExtractor",
    "default_extractors",
    "extract_credential",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidSideTokenError",
]
