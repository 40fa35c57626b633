"""
Accounts module interface.

Routes and scripts depend on IAccountService, not the concrete implementation.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import Role

from .models import (
    AccountDetail,
    AccountListResponse,
    AccountProfile,
    AccountPublic,
    AccountStats,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    OutgoingMail,
    RegisterRequest,
    RegistrationResult,
    UpdateProfileRequest,
    VerificationStatus,
)


@runtime_checkable
class IAccountService(Protocol):
    """
    Interface for account lifecycle operations.

    Mail is never sent from here: operations that need one return an
    OutgoingMail and the caller decides how to deliver it.
    """

    async def register(self, request: RegisterRequest) -> RegistrationResult:
        """
        Create an account, its profile and a session.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
            AccountIdExhaustedError: If no unique account ID could be allocated
        """
        ...

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Check credentials and issue a session.

        Raises:
            InvalidCredentialsError: For unknown email or wrong password alike
        """
        ...

    async def get_public(self, record_id: str) -> Optional[AccountPublic]:
        """Get the public projection, or None if the account is gone."""
        ...

    async def get_detail(self, record_id: str) -> AccountDetail:
        """Get projection and profile. Raises AccountNotFoundError."""
        ...

    async def get_role(self, record_id: str) -> Optional[Role]:
        """Get the currently stored role, or None if the account is gone."""
        ...

    async def request_password_reset(self, email: str) -> Optional[OutgoingMail]:
        """
        Store a fresh reset token for the account, if it exists.

        Returns:
            The reset mail to deliver, or None when no account matches
        """
        ...

    async def reset_password(self, token: str, new_password: str) -> None:
        """Redeem a reset token. Raises InvalidSideTokenError."""
        ...

    async def issue_verification(self, record_id: str) -> OutgoingMail:
        """Replace the verification token and return the mail carrying it."""
        ...

    async def verify_email(self, token: str) -> AccountPublic:
        """Redeem a verification token. Raises InvalidSideTokenError."""
        ...

    async def change_password(self, record_id: str, request: ChangePasswordRequest) -> None:
        """Raises IncorrectPasswordError if the current password is wrong."""
        ...

    async def update_profile(
        self,
        record_id: str,
        request: UpdateProfileRequest,
    ) -> AccountProfile:
        ...

    async def get_stats(self) -> AccountStats:
        ...

    async def list_accounts(
        self,
        page: int,
        limit: int,
        status: Optional[VerificationStatus] = None,
    ) -> AccountListResponse:
        ...

    async def set_verification_status(
        self,
        record_id: str,
        status: VerificationStatus,
    ) -> AccountPublic:
        ...

    async def set_role(self, actor_id: str, record_id: str, role: Role) -> AccountPublic:
        """Raises SelfModificationError when an admin targets themselves."""
        ...

    async def delete_account(self, actor_id: str, record_id: str) -> None:
        """Raises SelfModificationError when an admin targets themselves."""
        ...
