"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Pydantic Settings resolves values in this order:
  1. Environment variables (highest priority)
  2. .env file values
  3. Defaults defined here (lowest priority)

Usage:
    from backoffice.config import settings
    print(settings.DATABASE_URL)
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the back-office API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Bank Back-Office API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # --- Database ---
    # Points at the ledger database; any async SQLAlchemy URL works
    # (e.g. mysql+aiomysql://... for the legacy MySQL schema)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/bank.db"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    # "standard" or "json"
    LOG_FORMAT: str = "standard"

    # --- Reports ---
    # Holders whose monthly out-of-city withdrawals exceed this total are reported
    OUT_OF_CITY_WITHDRAWAL_THRESHOLD: Decimal = Decimal("1000000")

    # --- Statements ---
    CURRENCY_SYMBOL: str = "€"

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
