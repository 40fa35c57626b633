"""
Centralized configuration for the Pinnacle Metals backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced by prefix (e.g., SMTP_*, SUPABASE_*).
"""

from decimal import Decimal
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Pinnacle Metals API"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Sessions
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    session_ttl_days: int = 7
    auth_cookie_name: str = "auth"
    token_query_param: str = "token"
    # When enabled, admin checks re-read the stored role instead of
    # trusting the role claim carried by the session token.
    recheck_role_on_admin: bool = False

    # Side tokens
    reset_token_ttl_minutes: int = 60
    verification_token_ttl_hours: int = 48

    # Frontend URL (for reset / verification links)
    client_origin: str = "http://localhost:5173"

    # Outbound mail
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_use_ssl: bool = False
    smtp_starttls: bool = True
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "Pinnacle Metals <noreply@pinnaclemetals.co.uk>"

    # Copper price feed
    copper_price_url: str = ""
    metals_api_key: str = ""
    price_feed_timeout_seconds: float = 5.0
    usd_to_gbp_rate: Decimal = Decimal("0.79")
    fallback_copper_price: Decimal = Decimal("6840.50")
    fallback_jitter: Decimal = Decimal("20")

    @property
    def is_production(self) -> bool:
        """Whether the service runs with production cookie policy."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
