"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. This keeps the token signing secret out of source code — the .env
file is gitignored.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from bank_ledger.config import settings
    print(settings.MAX_UPDATE_RETRIES)
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the ledger service.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Shared with the identity provider, used to verify bearer tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Bank Ledger API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # --- Database ---
    # SQLite for local runs; swap to a postgresql+asyncpg URL for production
    # SQLite has no native NUMERIC: product rates are stored as floats and
    # SQLAlchemy warns on load. Three-decimal rates round-trip exactly.
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/ledger.db"

    # --- Authentication ---
    # Tokens are issued by the external identity service; we only verify them.
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # --- Ledger ---
    # Single-currency ledger; every amount is an integer count of this
    # currency's minor unit.
    CURRENCY: str = "KRW"
    ACCOUNT_NUMBER_LENGTH: int = 12
    # Attempts the account authority makes before surfacing a
    # concurrent-update conflict to the caller.
    MAX_UPDATE_RETRIES: int = 3

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["standard", "json"] = "standard"

    # --- CORS ---
    # Origins allowed to make cross-origin requests (frontend URLs)
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
