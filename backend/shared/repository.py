"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from datetime import datetime, timezone
from typing import TypeVar, Generic, Optional
from pydantic import TypeAdapter
from supabase import Client


T = TypeVar("T")

_DATETIME = TypeAdapter(datetime)

# Postgres error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class AccountRepository(BaseRepository[Account]):
            def get_by_id(self, account_id: str) -> Optional[Account]:
                result = self._db.table("accounts").select("*").eq("id", account_id).execute()
                if not result.data:
                    return None
                return self._map_to_account(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _now_iso() -> str:
        """Current UTC time formatted for timestamptz columns."""
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        """Parse an ISO timestamp returned by PostgREST."""
        if not value:
            return None
        # PostgREST trims trailing zeros from fractional seconds
        return _DATETIME.validate_python(value)
