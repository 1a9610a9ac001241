"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.  The
pricing and scheduling services take their own frozen config objects; the
values here are the subset operations is expected to tune per deployment.
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the MoveQuote backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Application --
    app_name: str = "MoveQuote API"
    app_version: str = "0.1.0"
    debug: bool = False

    # -- API --
    api_v1_prefix: str = "/api/v1"
    cors_allowed_origins: str = "*"

    # -- Pricing --
    currency: str = "GBP"
    vat_rate: Decimal = Decimal("0.20")
    quote_cache_ttl_seconds: int = 300

    # -- Scheduling --
    min_advance_booking_hours: int = 2
    max_advance_booking_days: int = 30


settings = Settings()
