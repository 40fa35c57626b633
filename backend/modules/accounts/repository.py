"""
Account repository for database access.

Encapsulates all Supabase queries and data mapping for account tables:
- accounts
- account_profiles
"""

from datetime import datetime
from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.repository import BaseRepository, UNIQUE_VIOLATION
from .exceptions import DuplicateKeyError
from .models import (
    Account,
    AccountProfile,
    AccountSummary,
    VerificationStatus,
)

ACCOUNTS_TABLE = "accounts"
PROFILES_TABLE = "account_profiles"

PROFILE_FIELDS = (
    "full_name",
    "phone",
    "address_line1",
    "city",
    "postcode",
    "business_name",
)


class AccountRepository(BaseRepository[Account]):
    """
    Repository for account data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for deciding who may change what.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_by_id(self, record_id: str) -> Optional[Account]:
        result = self._db.table(ACCOUNTS_TABLE).select("*").eq("id", record_id).execute()
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def get_by_email(self, email: str) -> Optional[Account]:
        """Look up by normalized email."""
        result = self._db.table(ACCOUNTS_TABLE).select("*").eq("email", email).execute()
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        result = (
            self._db.table(ACCOUNTS_TABLE)
            .select("*")
            .eq("email_verification_token", token)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def account_id_exists(self, account_id: str) -> bool:
        result = (
            self._db.table(ACCOUNTS_TABLE)
            .select("id")
            .eq("account_id", account_id)
            .execute()
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> Account:
        """
        Insert a new account row.

        Raises:
            DuplicateKeyError: If the email or account_id is already taken
        """
        try:
            result = self._db.table(ACCOUNTS_TABLE).insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                text = f"{e.message} {e.details}"
                raise DuplicateKeyError("account_id" if "account_id" in text else "email")
            raise
        return self._map_to_account(result.data[0])

    def update(self, record_id: str, data: dict[str, Any]) -> Optional[Account]:
        """Apply a partial update, returning the updated account if it exists."""
        data = {**data, "updated_at": self._now_iso()}
        result = self._db.table(ACCOUNTS_TABLE).update(data).eq("id", record_id).execute()
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def set_reset_token(self, record_id: str, token: str, expires_at: datetime) -> None:
        """Store a reset token, replacing any earlier one."""
        self.update(
            record_id,
            {"reset_token": token, "reset_token_expires_at": expires_at.isoformat()},
        )

    def consume_reset_token(
        self,
        token: str,
        now: datetime,
        password_hash: str,
    ) -> Optional[Account]:
        """
        Redeem a reset token and set the new password in one statement.

        The update only matches while the token is stored and unexpired, and
        it clears the token, so a token can succeed at most once.
        """
        data = {
            "password_hash": password_hash,
            "reset_token": None,
            "reset_token_expires_at": None,
            "updated_at": self._now_iso(),
        }
        result = (
            self._db.table(ACCOUNTS_TABLE)
            .update(data)
            .eq("reset_token", token)
            .gt("reset_token_expires_at", now.isoformat())
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def set_verification_token(
        self,
        record_id: str,
        token: str,
        expires_at: Optional[datetime],
    ) -> None:
        self.update(
            record_id,
            {
                "email_verification_token": token,
                "email_verification_expires_at": expires_at.isoformat() if expires_at else None,
            },
        )

    def consume_verification_token(self, record_id: str, token: str) -> Optional[Account]:
        """
        Mark the account verified and clear the token.

        Matches on both ID and token so a concurrent redemption of the same
        token finds nothing to update.
        """
        data = {
            "verification_status": VerificationStatus.VERIFIED.value,
            "email_verification_token": None,
            "email_verification_expires_at": None,
            "updated_at": self._now_iso(),
        }
        result = (
            self._db.table(ACCOUNTS_TABLE)
            .update(data)
            .eq("id", record_id)
            .eq("email_verification_token", token)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_account(result.data[0])

    def delete(self, record_id: str) -> bool:
        """
        Delete an account.

        The profile row is removed explicitly; other dependent rows are
        expected to cascade on the foreign key.
        """
        self._db.table(PROFILES_TABLE).delete().eq("user_id", record_id).execute()
        result = self._db.table(ACCOUNTS_TABLE).delete().eq("id", record_id).execute()
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    def get_profile(self, record_id: str) -> Optional[AccountProfile]:
        result = (
            self._db.table(PROFILES_TABLE)
            .select("*")
            .eq("user_id", record_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def upsert_profile(self, record_id: str, fields: dict[str, Any]) -> AccountProfile:
        data = {
            **{k: v for k, v in fields.items() if k in PROFILE_FIELDS},
            "user_id": record_id,
            "updated_at": self._now_iso(),
        }
        result = (
            self._db.table(PROFILES_TABLE)
            .upsert(data, on_conflict="user_id")
            .execute()
        )
        return self._map_to_profile(result.data[0])

    def get_profiles(self, record_ids: list[str]) -> dict[str, AccountProfile]:
        """Batch-load profiles keyed by account record ID."""
        if not record_ids:
            return {}
        result = (
            self._db.table(PROFILES_TABLE)
            .select("*")
            .in_("user_id", record_ids)
            .execute()
        )
        return {row["user_id"]: self._map_to_profile(row) for row in result.data}

    # -------------------------------------------------------------------------
    # Admin queries
    # -------------------------------------------------------------------------

    def list_accounts(
        self,
        page: int = 1,
        page_size: int = 10,
        status: Optional[VerificationStatus] = None,
    ) -> tuple[list[AccountSummary], int]:
        """
        List accounts, newest first.

        Returns:
            (items for the requested page, total matching count)
        """
        offset = (page - 1) * page_size

        total = self.count(status)

        query = self._db.table(ACCOUNTS_TABLE).select(
            "id,email,role,account_id,verification_status,created_at"
        )
        if status:
            query = query.eq("verification_status", status.value)

        result = (
            query.order("created_at", desc=True)
            .range(offset, offset + page_size - 1)
            .execute()
        )

        profiles = self.get_profiles([row["id"] for row in result.data])
        items = [
            AccountSummary(
                id=row["id"],
                email=row["email"],
                role=row["role"],
                account_id=row["account_id"],
                verification_status=row["verification_status"],
                created_at=self._parse_datetime(row.get("created_at")),
                full_name=profiles[row["id"]].full_name if row["id"] in profiles else "",
            )
            for row in result.data
        ]
        return items, total

    def count(self, status: Optional[VerificationStatus] = None) -> int:
        query = self._db.table(ACCOUNTS_TABLE).select("id", count="exact")
        if status:
            query = query.eq("verification_status", status.value)
        result = query.execute()
        return result.count or 0

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_account(self, data: dict[str, Any]) -> Account:
        return Account(
            id=data["id"],
            email=data["email"],
            password_hash=data["password_hash"],
            role=data.get("role", "user"),
            account_id=data["account_id"],
            verification_status=data.get("verification_status", "unverified"),
            reset_token=data.get("reset_token"),
            reset_token_expires_at=self._parse_datetime(data.get("reset_token_expires_at")),
            email_verification_token=data.get("email_verification_token"),
            email_verification_expires_at=self._parse_datetime(
                data.get("email_verification_expires_at")
            ),
            created_at=self._parse_datetime(data.get("created_at")),
            updated_at=self._parse_datetime(data.get("updated_at")),
        )

    def _map_to_profile(self, data: dict[str, Any]) -> AccountProfile:
        return AccountProfile(
            full_name=data.get("full_name") or "",
            phone=data.get("phone"),
            address_line1=data.get("address_line1"),
            city=data.get("city"),
            postcode=data.get("postcode"),
            business_name=data.get("business_name"),
        )


# Module-level instance getter
_repository_instance: Optional[AccountRepository] = None


def get_account_repository() -> AccountRepository:
    """Get the account repository singleton."""
    global _repository_instance
    if _repository_instance is None:
        from shared.database import get_supabase_client
        _repository_instance = AccountRepository(get_supabase_client())
    return _repository_instance


def reset_account_repository() -> None:
    """Reset the account repository singleton (for testing)."""
    global _repository_instance
    _repository_instance = None
