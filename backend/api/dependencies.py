"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ITokenService
    from modules.accounts.interfaces import IAccountService
    from modules.accounts.repository import AccountRepository
    from modules.pricing.interfaces import IPriceFeed, IPriceResolver
    from modules.pricing.repository import PricingConfigRepository
    from shared.mailer import Mailer


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._token_service: "ITokenService | None" = None
        self._account_repository: "AccountRepository | None" = None
        self._account_service: "IAccountService | None" = None
        self._pricing_repository: "PricingConfigRepository | None" = None
        self._price_feed: "IPriceFeed | None" = None
        self._price_resolver: "IPriceResolver | None" = None
        self._mailer: "Mailer | None" = None

    @property
    def tokens(self) -> "ITokenService":
        """Get the token service instance."""
        if self._token_service is None:
            from modules.auth.service import TokenService
            self._token_service = TokenService()
        return self._token_service

    @property
    def account_repository(self) -> "AccountRepository":
        """Get the account repository instance."""
        if self._account_repository is None:
            from modules.accounts.repository import AccountRepository
            from shared.database import get_supabase_client
            self._account_repository = AccountRepository(get_supabase_client())
        return self._account_repository

    @property
    def accounts(self) -> "IAccountService":
        """Get the account service instance."""
        if self._account_service is None:
            from modules.accounts.service import AccountService
            self._account_service = AccountService(
                repository=self.account_repository,
                tokens=self.tokens,
            )
        return self._account_service

    @property
    def pricing_repository(self) -> "PricingConfigRepository":
        """Get the pricing config repository instance."""
        if self._pricing_repository is None:
            from modules.pricing.repository import PricingConfigRepository
            from shared.database import get_supabase_client
            self._pricing_repository = PricingConfigRepository(get_supabase_client())
        return self._pricing_repository

    @property
    def price_feed(self) -> "IPriceFeed":
        """Get the live price feed instance."""
        if self._price_feed is None:
            from modules.pricing.feed import MetalsApiPriceFeed
            self._price_feed = MetalsApiPriceFeed()
        return self._price_feed

    @property
    def pricing(self) -> "IPriceResolver":
        """Get the price resolver instance."""
        if self._price_resolver is None:
            from modules.pricing.service import PriceResolver
            self._price_resolver = PriceResolver(
                repository=self.pricing_repository,
                feed=self.price_feed,
            )
        return self._price_resolver

    @property
    def mailer(self) -> "Mailer":
        """Get the mail transport instance."""
        if self._mailer is None:
            from shared.mailer import Mailer
            self._mailer = Mailer()
        return self._mailer

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._token_service = None
        self._account_repository = None
        self._account_service = None
        self._pricing_repository = None
        self._price_feed = None
        self._price_resolver = None
        self._mailer = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_app_settings() -> Settings:
    """FastAPI dependency for application settings."""
    return get_settings()


def get_token_service() -> "ITokenService":
    """FastAPI dependency for the token service."""
    return get_container().tokens


def get_account_service() -> "IAccountService":
    """FastAPI dependency for the account service."""
    return get_container().accounts


def get_price_resolver() -> "IPriceResolver":
    """FastAPI dependency for the price resolver."""
    return get_container().pricing


def get_mailer() -> "Mailer":
    """FastAPI dependency for the mail transport."""
    return get_container().mailer
