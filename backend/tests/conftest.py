"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
settings, a token service, an in-memory account repository and an app whose
services are wired to those fakes.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from unittest.mock import MagicMock
import itertools
import random

import pytest
from fastapi.testclient import TestClient

from shared.config import Settings, get_settings
from shared.mailer import Mailer
from modules.auth.service import TokenService
from modules.accounts.exceptions import DuplicateKeyError
from modules.accounts.models import (
    Account,
    AccountProfile,
    AccountSummary,
    VerificationStatus,
)
from modules.accounts.repository import PROFILE_FIELDS
from modules.accounts.service import AccountService
from modules.pricing.models import PricingConfig
from modules.pricing.service import PriceResolver
from modules.pricing.exceptions import UpstreamUnavailableError


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


class FakeAccountRepository:
    """
    In-memory stand-in for AccountRepository.

    Mirrors the repository's contract, including unique email / account_id
    and the conditional side-token updates.
    """

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.profiles: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def _to_account(self, row: dict[str, Any]) -> Account:
        return Account(**row)

    def get_by_id(self, record_id: str) -> Optional[Account]:
        row = self.rows.get(record_id)
        return self._to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        for row in self.rows.values():
            if row["email"] == email:
                return self._to_account(row)
        return None

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        for row in self.rows.values():
            if row.get("email_verification_token") == token:
                return self._to_account(row)
        return None

    def account_id_exists(self, account_id: str) -> bool:
        return any(row["account_id"] == account_id for row in self.rows.values())

    def create(self, data: dict[str, Any]) -> Account:
        # Checked against the rows directly, like a unique index would be
        for row in self.rows.values():
            if row["account_id"] == data["account_id"]:
                raise DuplicateKeyError("account_id")
            if row["email"] == data["email"]:
                raise DuplicateKeyError("email")
        record_id = f"rec-{next(self._ids)}"
        now = datetime.now(timezone.utc)
        self.rows[record_id] = {"id": record_id, "created_at": now, "updated_at": now, **data}
        return self._to_account(self.rows[record_id])

    def update(self, record_id: str, data: dict[str, Any]) -> Optional[Account]:
        if record_id not in self.rows:
            return None
        self.rows[record_id].update(data)
        return self._to_account(self.rows[record_id])

    def set_reset_token(self, record_id: str, token: str, expires_at: datetime) -> None:
        self.update(record_id, {"reset_token": token, "reset_token_expires_at": expires_at})

    def consume_reset_token(
        self,
        token: str,
        now: datetime,
        password_hash: str,
    ) -> Optional[Account]:
        for record_id, row in self.rows.items():
            account = self._to_account(row)
            if (
                account.reset_token == token
                and account.reset_token_expires_at is not None
                and account.reset_token_expires_at > now
            ):
                return self.update(
                    record_id,
                    {
                        "password_hash": password_hash,
                        "reset_token": None,
                        "reset_token_expires_at": None,
                    },
                )
        return None

    def set_verification_token(
        self,
        record_id: str,
        token: str,
        expires_at: Optional[datetime],
    ) -> None:
        self.update(
            record_id,
            {"email_verification_token": token, "email_verification_expires_at": expires_at},
        )

    def consume_verification_token(self, record_id: str, token: str) -> Optional[Account]:
        row = self.rows.get(record_id)
        if row is None or row.get("email_verification_token") != token:
            return None
        return self.update(
            record_id,
            {
                "verification_status": VerificationStatus.VERIFIED.value,
                "email_verification_token": None,
                "email_verification_expires_at": None,
            },
        )

    def delete(self, record_id: str) -> bool:
        self.profiles.pop(record_id, None)
        return self.rows.pop(record_id, None) is not None

    def get_profile(self, record_id: str) -> Optional[AccountProfile]:
        profile = self.profiles.get(record_id)
        return AccountProfile(**profile) if profile else None

    def upsert_profile(self, record_id: str, fields: dict[str, Any]) -> AccountProfile:
        profile = self.profiles.setdefault(record_id, {})
        profile.update({k: v for k, v in fields.items() if k in PROFILE_FIELDS})
        return AccountProfile(**profile)

    def list_accounts(
        self,
        page: int = 1,
        page_size: int = 10,
        status: Optional[VerificationStatus] = None,
    ) -> tuple[list[AccountSummary], int]:
        rows = [
            row for row in self.rows.values()
            if status is None or row["verification_status"] == status.value
        ]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        offset = (page - 1) * page_size
        items = [
            AccountSummary(
                **self._to_account(row).to_public().model_dump(),
                created_at=row["created_at"],
                full_name=self.profiles.get(row["id"], {}).get("full_name", ""),
            )
            for row in rows[offset:offset + page_size]
        ]
        return items, len(rows)

    def count(self, status: Optional[VerificationStatus] = None) -> int:
        return len(self.list_accounts(1, len(self.rows) or 1, status)[0])


class FakePricingRepository:
    """In-memory singleton pricing config."""

    def __init__(self, base_copper_price: Optional[Decimal] = None):
        self.config = PricingConfig(base_copper_price=base_copper_price)
        self.saves = 0

    def get(self) -> PricingConfig:
        return self.config

    def save(self, base_copper_price: Optional[Decimal]) -> PricingConfig:
        self.saves += 1
        self.config = PricingConfig(
            base_copper_price=base_copper_price,
            updated_at=datetime.now(timezone.utc),
        )
        return self.config


class UnavailableFeed:
    """Price feed that always fails."""

    def __init__(self):
        self.calls = 0

    async def fetch_live_copper_price(self):
        self.calls += 1
        raise UpstreamUnavailableError("connection refused")


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the minimum bcrypt cost so hashing does not dominate test time."""
    monkeypatch.setattr("modules.accounts.passwords.BCRYPT_ROUNDS", 4)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    from api.dependencies import reset_container
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        client_origin="https://app.example.com",
        copper_price_url="https://quotes.example.com/latest",
        metals_api_key="test-metals-key",
        usd_to_gbp_rate=Decimal("0.79"),
        fallback_copper_price=Decimal("6840.50"),
        fallback_jitter=Decimal("20"),
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def account_repo() -> FakeAccountRepository:
    return FakeAccountRepository()


@pytest.fixture
def account_service(
    account_repo: FakeAccountRepository,
    token_service: TokenService,
    settings: Settings,
) -> AccountService:
    return AccountService(account_repo, token_service, settings)


@pytest.fixture
def pricing_repo() -> FakePricingRepository:
    return FakePricingRepository()


@pytest.fixture
def price_resolver(pricing_repo: FakePricingRepository, settings: Settings) -> PriceResolver:
    """Resolver whose live feed is down, so it serves simulated prices."""
    return PriceResolver(pricing_repo, UnavailableFeed(), settings, rng=random.Random(42))


@pytest.fixture
def mock_mailer() -> MagicMock:
    mailer = MagicMock(spec=Mailer)
    mailer.send.return_value = True
    return mailer


@pytest.fixture
def app(settings, token_service, account_service, price_resolver, mock_mailer):
    """Create a fresh app wired to in-memory services."""
    from api.app import create_app
    from api import dependencies

    app = create_app()
    app.dependency_overrides[dependencies.get_app_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_token_service] = lambda: token_service
    app.dependency_overrides[dependencies.get_account_service] = lambda: account_service
    app.dependency_overrides[dependencies.get_price_resolver] = lambda: price_resolver
    app.dependency_overrides[dependencies.get_mailer] = lambda: mock_mailer
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_token(account_repo: FakeAccountRepository, token_service: TokenService) -> str:
    """Session token for an admin account stored in the fake repository."""
    from shared.models import Role
    admin = account_repo.create(
        {
            "email": "admin@example.com",
            "password_hash": "unused",
            "role": Role.ADMIN.value,
            "account_id": "PM-00000000AA",
            "verification_status": VerificationStatus.VERIFIED.value,
        }
    )
    return token_service.issue_session(admin.id, Role.ADMIN)
