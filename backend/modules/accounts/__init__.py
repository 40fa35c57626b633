"""
Accounts module.

Handles registration, login, password reset, email verification, profiles
and the admin-side account operations.

Public API:
- IAccountService: Interface for account operations
- AccountPublic: Canonical user-facing projection of an account
- Request/response models for the account routes
- Account exceptions: EmailAlreadyRegisteredError, etc.
"""

from .interfaces import IAccountService
from .account_id import (
    ACCOUNT_ID_PATTERN,
    generate_account_id,
    allocate_account_id,
)
from .models import (
    Account,
    AccountPublic,
    AccountProfile,
    AccountSummary,
    AccountDetail,
    AccountListResponse,
    AccountStats,
    AuthResponse,
    VerificationStatus,
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    UpdateProfileRequest,
    UpdateVerificationRequest,
    UpdateRoleRequest,
    MessageResponse,
    OutgoingMail,
    RegistrationResult,
    normalize_email,
)
from .exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    AccountNotFoundError,
    AccountIdExhaustedError,
    WeakPasswordError,
    IncorrectPasswordError,
    SelfModificationError,
    DuplicateKeyError,
)

__all__ = [
    # Interface
    "IAccountService",
    # Account IDs
    "ACCOUNT_ID_PATTERN",
    "generate_account_id",
    "allocate_account_id",
    # Models
    "Account",
    "AccountPublic",
    "AccountProfile",
    "AccountSummary",
    "AccountDetail",
    "AccountListResponse",
    "AccountStats",
    "AuthResponse",
    "VerificationStatus",
    "RegisterRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ChangePasswordRequest",
    "UpdateProfileRequest",
    "UpdateVerificationRequest",
    "UpdateRoleRequest",
    "MessageResponse",
    "OutgoingMail",
    "RegistrationResult",
    "normalize_email",
    # Exceptions
    "EmailAlreadyRegisteredError",
    "InvalidCredentialsError",
    "AccountNotFoundError",
    "AccountIdExhaustedError",
    "WeakPasswordError",
    "IncorrectPasswordError",
    "SelfModificationError",
    "DuplicateKeyError",
]
