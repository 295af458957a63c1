"""
config.py — Centralized Application Configuration Loader

Purpose:
- Define a single source of truth for application settings.
- Load and validate environment variables from `.env` or OS environment.
- Provide documented, non-production defaults so the mock API boots with zero setup.

Settings:
- JWT_SECRET: HS256 signing key for session tokens.
- PORT / HOST: where uvicorn listens.
- APP_ENV: "development" or "production". Production refuses the default secret.
- BCRYPT_ROUNDS: bcrypt cost factor used by the credential hasher.
- LOG_LEVEL: root logging level.
- CORS_ORIGINS: origins allowed by the CORS middleware.

This module does NOT:
- Create stores or services.
- Start the server.
"""

from pathlib import Path
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/app/core/config.py
# .env should be at: backend/.env
_CONFIG_DIR = Path(__file__).parent  # backend/app/core
_BACKEND_DIR = _CONFIG_DIR.parent.parent  # backend
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    _ENV_FILE_PATH = str(_ENV_FILE.resolve())
else:
    # Fallback: relative path (pydantic will look in CWD)
    _ENV_FILE_PATH = ".env"

# Known-insecure development fallback. Never valid in production.
DEFAULT_JWT_SECRET = "dev_secret_change_me"


class Settings(BaseSettings):
    """
    Runtime settings for the mock store API.

    Every field has a default so the service starts without any environment.
    The signing secret default is for local development only; see
    `uses_default_secret`.
    """

    JWT_SECRET: str = Field(
        DEFAULT_JWT_SECRET,
        description="HS256 signing key for session tokens (override outside development)",
    )
    PORT: int = Field(
        3000,
        description="Port uvicorn listens on",
    )
    HOST: str = Field(
        "0.0.0.0",
        description="Address uvicorn binds to",
    )
    APP_ENV: str = Field(
        "development",
        description="Deployment environment: 'development' or 'production'",
    )
    BCRYPT_ROUNDS: int = Field(
        10,
        ge=4,
        le=31,
        description="bcrypt cost factor for password hashing",
    )
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def blank_secret_uses_default(cls, v: Any) -> str:
        """An empty JWT_SECRET counts as unset."""
        if isinstance(v, str):
            v = v.strip()
        return v or DEFAULT_JWT_SECRET

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def normalize_env(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def uses_default_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level instance shared by every importer.
settings = Settings()
