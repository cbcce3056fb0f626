"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Secrets never live in source code: the .env file is gitignored,
and .env.example provides a safe template for developers.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from bankcards.config import settings
    print(settings.SECRET_KEY)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the Bank Cards API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Used to sign JWT tokens
      - CARD_ENCRYPTION_PASSWORD / CARD_ENCRYPTION_SALT: Derive the card number cipher key
      - CARD_HASH_SECRET_KEY: HMAC key for the card number blind index

    The three card secrets are independent of each other. Changing the
    encryption password or salt makes previously stored card numbers
    unreadable; changing the hash key breaks duplicate detection for
    existing cards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Bank Cards API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # --- Database ---
    # SQLite for local runs; swap to a PostgreSQL (asyncpg) URL for production
    DATABASE_URL: str = "sqlite+aiosqlite:///./bankcards.db"

    # --- Authentication ---
    # REQUIRED: No default, forces the operator to set a real secret
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Card number protection ---
    # REQUIRED: password + salt for the AES-GCM card number cipher
    CARD_ENCRYPTION_PASSWORD: str
    CARD_ENCRYPTION_SALT: str
    # REQUIRED: separate key for the HMAC-SHA256 blind index
    CARD_HASH_SECRET_KEY: str

    # --- Bootstrap admin ---
    # When both are set and the username is free, an ADMIN user is created on startup
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
