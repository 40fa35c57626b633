"""
Account service implementation.

Registration, login, password lifecycle, email verification and the
admin-side account operations. Persistence goes through AccountRepository
and every session or side token comes from the token service.
"""

import asyncio
import logging
import math
from datetime import datetime
from typing import Callable, Optional

from shared.config import Settings, get_settings
from shared.models import Role

from modules.auth.exceptions import InvalidSideTokenError
from modules.auth.interfaces import ITokenService
from modules.auth.service import utc_now

from .account_id import allocate_account_id, generate_account_id
from .emails import build_link, password_reset_mail, verification_mail
from .exceptions import (
    AccountNotFoundError,
    DuplicateKeyError,
    EmailAlreadyRegisteredError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    SelfModificationError,
)
from .interfaces import IAccountService
from .models import (
    Account,
    AccountDetail,
    AccountListResponse,
    AccountProfile,
    AccountPublic,
    AccountStats,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    OutgoingMail,
    Pagination,
    RegisterRequest,
    RegistrationResult,
    UpdateProfileRequest,
    VerificationStatus,
    normalize_email,
)
from .passwords import hash_password, validate_password_policy, verify_password
from .repository import AccountRepository

logger = logging.getLogger(__name__)

RESET_PATH = "/reset-password"
VERIFY_PATH = "/verify-email"


class AccountService(IAccountService):
    """
    Account service backed by Supabase.

    bcrypt work runs in a worker thread so a login does not stall the
    event loop for other requests.
    """

    def __init__(
        self,
        repository: AccountRepository,
        tokens: ITokenService,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
        generate_id: Callable[[], str] = generate_account_id,
    ):
        self._repo = repository
        self._tokens = tokens
        self._settings = settings or get_settings()
        self._clock = clock
        self._generate_id = generate_id
        self._dummy_hash: Optional[str] = None

    # -------------------------------------------------------------------------
    # Registration and login
    # -------------------------------------------------------------------------

    async def register(self, request: RegisterRequest) -> RegistrationResult:
        email = normalize_email(request.email)
        validate_password_policy(request.password)

        if self._repo.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError()

        password_hash = await asyncio.to_thread(hash_password, request.password)
        verification = self._tokens.issue_verification_token()

        base = {
            "email": email,
            "password_hash": password_hash,
            "role": Role.USER.value,
            "verification_status": VerificationStatus.UNVERIFIED.value,
            "email_verification_token": verification.token,
            "email_verification_expires_at": (
                verification.expires_at.isoformat() if verification.expires_at else None
            ),
        }
        account = self._allocate(base)

        self._repo.upsert_profile(account.id, request.to_profile().model_dump())
        logger.info(f"Registered account {account.account_id}")

        link = build_link(self._settings.client_origin, VERIFY_PATH, verification.token)
        return RegistrationResult(
            auth=self._session_for(account),
            verification_mail=verification_mail(account.email, link),
        )

    def _allocate(self, base: dict) -> Account:
        return allocate_account_id(
            lambda candidate: self._claim(base, candidate),
            generate=self._generate_id,
        )

    def _claim(self, base: dict, candidate: str) -> Optional[Account]:
        """Insert with `candidate` as account ID, or None if it is taken."""
        if self._repo.account_id_exists(candidate):
            return None
        try:
            return self._repo.create({**base, "account_id": candidate})
        except DuplicateKeyError as e:
            if e.field == "account_id":
                return None
            raise EmailAlreadyRegisteredError()

    async def login(self, request: LoginRequest) -> AuthResponse:
        account = self._repo.get_by_email(normalize_email(request.email))

        if account is None:
            # Burn the same bcrypt cost so response timing does not reveal the miss
            await asyncio.to_thread(self._verify_dummy, request.password)
            raise InvalidCredentialsError()

        ok = await asyncio.to_thread(verify_password, request.password, account.password_hash)
        if not ok:
            raise InvalidCredentialsError()

        return self._session_for(account)

    def _session_for(self, account: Account) -> AuthResponse:
        token = self._tokens.issue_session(account.id, account.role)
        return AuthResponse(token=token, user=account.to_public())

    def _verify_dummy(self, password: str) -> None:
        # Runs in a worker thread, including the one-off hash on first use
        if self._dummy_hash is None:
            self._dummy_hash = hash_password("not-a-real-password")
        verify_password(password, self._dummy_hash)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def get_public(self, record_id: str) -> Optional[AccountPublic]:
        account = self._repo.get_by_id(record_id)
        return account.to_public() if account else None

    async def get_detail(self, record_id: str) -> AccountDetail:
        account = self._repo.get_by_id(record_id)
        if account is None:
            raise AccountNotFoundError(record_id)
        return AccountDetail(
            user=account.to_public(),
            profile=self._repo.get_profile(record_id),
        )

    async def get_role(self, record_id: str) -> Optional[Role]:
        account = self._repo.get_by_id(record_id)
        return account.role if account else None

    # -------------------------------------------------------------------------
    # Password reset
    # -------------------------------------------------------------------------

    async def request_password_reset(self, email: str) -> Optional[OutgoingMail]:
        account = self._repo.get_by_email(normalize_email(email))
        if account is None:
            return None

        # A newer request overwrites the stored token, invalidating older links
        reset = self._tokens.issue_reset_token()
        self._repo.set_reset_token(account.id, reset.token, reset.expires_at)

        link = build_link(self._settings.client_origin, RESET_PATH, reset.token)
        return password_reset_mail(
            account.email,
            link,
            self._settings.reset_token_ttl_minutes,
        )

    async def reset_password(self, token: str, new_password: str) -> None:
        validate_password_policy(new_password)
        password_hash = await asyncio.to_thread(hash_password, new_password)

        account = self._repo.consume_reset_token(token, self._clock(), password_hash)
        if account is None:
            raise InvalidSideTokenError("reset")
        logger.info(f"Password reset for account {account.account_id}")

    # -------------------------------------------------------------------------
    # Email verification
    # -------------------------------------------------------------------------

    async def issue_verification(self, record_id: str) -> OutgoingMail:
        account = self._repo.get_by_id(record_id)
        if account is None:
            raise AccountNotFoundError(record_id)

        verification = self._tokens.issue_verification_token()
        self._repo.set_verification_token(
            account.id,
            verification.token,
            verification.expires_at,
        )
        link = build_link(self._settings.client_origin, VERIFY_PATH, verification.token)
        return verification_mail(account.email, link)

    async def verify_email(self, token: str) -> AccountPublic:
        if not token:
            raise InvalidSideTokenError("verification")

        account = self._repo.get_by_verification_token(token)
        if account is None:
            raise InvalidSideTokenError("verification")

        expires_at = account.email_verification_expires_at
        if expires_at is not None and expires_at <= self._clock():
            raise InvalidSideTokenError("verification")

        verified = self._repo.consume_verification_token(account.id, token)
        if verified is None:
            raise InvalidSideTokenError("verification")
        return verified.to_public()

    # -------------------------------------------------------------------------
    # Self-service
    # -------------------------------------------------------------------------

    async def change_password(self, record_id: str, request: ChangePasswordRequest) -> None:
        account = self._repo.get_by_id(record_id)
        if account is None:
            raise AccountNotFoundError(record_id)

        ok = await asyncio.to_thread(
            verify_password, request.current_password, account.password_hash
        )
        if not ok:
            raise IncorrectPasswordError()

        validate_password_policy(request.new_password)
        password_hash = await asyncio.to_thread(hash_password, request.new_password)
        self._repo.update(record_id, {"password_hash": password_hash})

    async def update_profile(
        self,
        record_id: str,
        request: UpdateProfileRequest,
    ) -> AccountProfile:
        return self._repo.upsert_profile(record_id, request.model_dump(exclude_unset=True))

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    async def get_stats(self) -> AccountStats:
        return AccountStats(
            total_users=self._repo.count(),
            verified_users=self._repo.count(VerificationStatus.VERIFIED),
            unverified_users=self._repo.count(VerificationStatus.UNVERIFIED),
        )

    async def list_accounts(
        self,
        page: int,
        limit: int,
        status: Optional[VerificationStatus] = None,
    ) -> AccountListResponse:
        items, total = self._repo.list_accounts(page, limit, status)
        return AccountListResponse(
            users=items,
            pagination=Pagination(total=total, page=page, pages=math.ceil(total / limit)),
        )

    async def set_verification_status(
        self,
        record_id: str,
        status: VerificationStatus,
    ) -> AccountPublic:
        account = self._repo.update(record_id, {"verification_status": status.value})
        if account is None:
            raise AccountNotFoundError(record_id)
        return account.to_public()

    async def set_role(self, actor_id: str, record_id: str, role: Role) -> AccountPublic:
        if actor_id == record_id:
            raise SelfModificationError("change the role of")

        account = self._repo.update(record_id, {"role": role.value})
        if account is None:
            raise AccountNotFoundError(record_id)
        # Tokens already issued keep their old role claim until they expire
        logger.info(f"Role of account {account.account_id} set to {role.value}")
        return account.to_public()

    async def delete_account(self, actor_id: str, record_id: str) -> None:
        if actor_id == record_id:
            raise SelfModificationError("delete")

        if not self._repo.delete(record_id):
            raise AccountNotFoundError(record_id)
        logger.info(f"Deleted account record {record_id}")

    async def ensure_admin(
        self,
        email: str,
        password: Optional[str] = None,
        promote_only: bool = False,
    ) -> Account:
        """
        Promote an existing account to admin or create a new admin.

        Used by the bootstrap CLI. Passing a password for an existing
        account replaces its password.
        """
        email = normalize_email(email)
        existing = self._repo.get_by_email(email)

        if existing is not None:
            data = {"role": Role.ADMIN.value}
            if password:
                validate_password_policy(password)
                data["password_hash"] = await asyncio.to_thread(hash_password, password)
            return self._repo.update(existing.id, data) or existing

        if promote_only:
            raise AccountNotFoundError(email)
        if not password:
            raise ValueError("A password is required to create a new admin")

        validate_password_policy(password)
        base = {
            "email": email,
            "password_hash": await asyncio.to_thread(hash_password, password),
            "role": Role.ADMIN.value,
            "verification_status": VerificationStatus.VERIFIED.value,
        }
        return self._allocate(base)


# Module-level instance getter
_service_instance: Optional[AccountService] = None


def get_account_service() -> AccountService:
    """Get the account service singleton."""
    global _service_instance
    if _service_instance is None:
        from modules.auth.service import get_token_service
        from .repository import get_account_repository
        _service_instance = AccountService(get_account_repository(), get_token_service())
    return _service_instance


def reset_account_service() -> None:
    """Reset the account service singleton (for testing)."""
    global _service_instance
    _service_instance = None
