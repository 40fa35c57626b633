"""
Accounts module exceptions.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ResourceExhaustedError,
    ValidationError,
)


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self):
        super().__init__("Email already in use", code="EMAIL_IN_USE")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login fails.

    Deliberately identical for unknown emails and wrong passwords.
    """

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class AccountNotFoundError(NotFoundError):
    """Raised when an account record does not exist."""

    def __init__(self, account_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"id": account_id},
        )


class AccountIdExhaustedError(ResourceExhaustedError):
    """Raised when every candidate account ID collided with an existing one."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not allocate a unique account ID after {attempts} attempts",
            code="ACCOUNT_ID_EXHAUSTED",
            details={"attempts": attempts},
        )


class WeakPasswordError(ValidationError):
    """Raised when a new password does not meet the policy."""

    def __init__(self, reason: str):
        super().__init__(reason, code="WEAK_PASSWORD")


class IncorrectPasswordError(ValidationError):
    """Raised when the current password given for a change is wrong."""

    def __init__(self):
        super().__init__("Current password is incorrect", code="INCORRECT_PASSWORD")


class SelfModificationError(ValidationError):
    """Raised when an admin tries to delete or demote their own account."""

    def __init__(self, action: str):
        super().__init__(
            f"You cannot {action} your own admin account",
            code="SELF_MODIFICATION",
            details={"action": action},
        )


class DuplicateKeyError(ConflictError):
    """Raised by the repository when an insert hits a unique constraint."""

    def __init__(self, field: str):
        super().__init__(
            f"Duplicate value for {field}",
            code="DUPLICATE_KEY",
            details={"field": field},
        )
        self.field = field
