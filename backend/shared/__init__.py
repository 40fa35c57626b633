"""
Shared infrastructure for Pinnacle Metals backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- mailer: Best-effort SMTP delivery

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    PinnacleError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ResourceExhaustedError,
    ExternalServiceError,
)
from .models import AuthenticatedUser, Role

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "PinnacleError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "ResourceExhaustedError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "Role",
]
