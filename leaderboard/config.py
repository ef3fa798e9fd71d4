"""
Application configuration using Pydantic settings.

Usage:
    from leaderboard.config import get_settings
    settings = get_settings()
"""

import os
import warnings
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default/weak values rejected for the token signing secret
FORBIDDEN_SECRETS = (
    "CHANGE_ME", "changeme", "secret", "your-secret-key",
    "jwt-secret", "supersecret", "development", "test",
)
MIN_SECRET_LENGTH = 32


def _is_production() -> bool:
    return os.getenv("ENV", "development").lower() in ("production", "prod")


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - LEADERBOARD_AUTH_SECRET (min 32 chars)
        - LEADERBOARD_ADMIN_API_KEY / LEADERBOARD_ADMIN_API_SECRET
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Leaderboard API"
    api_prefix: str = "/api"
    debug: bool = Field(default=False, validation_alias="LEADERBOARD_DEBUG")
    logging_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", validation_alias="LEADERBOARD_LOGGING_LEVEL"
    )

    # Database
    database_url: str = Field(default="sqlite:///leaderboard.db", validation_alias="LEADERBOARD_DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="LEADERBOARD_DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="LEADERBOARD_DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="LEADERBOARD_DB_POOL_PRE_PING")
    # Create missing tables on startup; disable when the schema is managed by Alembic
    auto_create_tables: bool = Field(default=True, validation_alias="LEADERBOARD_AUTO_CREATE_TABLES")

    # Token authentication
    auth_secret: str = Field(default="CHANGE_ME", validation_alias="LEADERBOARD_AUTH_SECRET")
    jwt_algorithm: str = Field(default="HS256")
    jwt_audience: str = Field(default="leaderboard-api")
    access_token_expire_minutes: int = Field(default=60, validation_alias="LEADERBOARD_TOKEN_EXPIRE_MINUTES")

    # Admin application bootstrapped on startup
    admin_api_key: Optional[str] = Field(default=None, validation_alias="LEADERBOARD_ADMIN_API_KEY")
    admin_api_secret: Optional[str] = Field(default=None, validation_alias="LEADERBOARD_ADMIN_API_SECRET")

    # CORS
    cors_allowed_origins: str = Field(default="*", validation_alias="LEADERBOARD_CORS_ALLOWED_ORIGINS")

    # Score submission
    submission_max_retries: int = Field(default=3, ge=1, validation_alias="LEADERBOARD_SUBMISSION_MAX_RETRIES")
    submission_retry_backoff: float = Field(
        default=0.05, ge=0, validation_alias="LEADERBOARD_SUBMISSION_RETRY_BACKOFF"
    )

    @field_validator("logging_level", mode="before")
    @classmethod
    def normalize_logging_level(cls, v: str) -> str:
        """Accept upper-case levels and the 'warn' shorthand."""
        v = str(v).lower()
        return "warning" if v == "warn" else v

    @field_validator("auth_secret")
    @classmethod
    def validate_auth_secret(cls, v: str) -> str:
        """Validate token secret - warns in dev, errors in production."""
        is_forbidden = v.lower() in [fv.lower() for fv in FORBIDDEN_SECRETS]
        is_too_short = len(v) < MIN_SECRET_LENGTH

        if _is_production():
            if is_forbidden:
                raise ValueError(
                    f"LEADERBOARD_AUTH_SECRET cannot be a default value ('{v}') in production. "
                    "Generate a secure key with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
                )
            if is_too_short:
                raise ValueError(
                    f"LEADERBOARD_AUTH_SECRET must be at least {MIN_SECRET_LENGTH} characters "
                    f"in production (got {len(v)})."
                )
        elif is_forbidden:
            warnings.warn(
                f"LEADERBOARD_AUTH_SECRET is set to a default value ('{v}'). "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif is_too_short:
            warnings.warn(
                f"LEADERBOARD_AUTH_SECRET should be at least {MIN_SECRET_LENGTH} characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )

        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def has_admin_credentials(self) -> bool:
        return bool(self.admin_api_key and self.admin_api_secret)

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings_ = []

        if self.auth_secret == "CHANGE_ME":
            errors.append("LEADERBOARD_AUTH_SECRET must be set for production")
        elif len(self.auth_secret) < MIN_SECRET_LENGTH:
            errors.append(f"LEADERBOARD_AUTH_SECRET must be at least {MIN_SECRET_LENGTH} characters")

        if not self.has_admin_credentials:
            warnings_.append(
                "LEADERBOARD_ADMIN_API_KEY/LEADERBOARD_ADMIN_API_SECRET not set - "
                "no admin application will be registered on startup."
            )

        if self.database_url.startswith("sqlite"):
            warnings_.append(
                "SQLite does not support row locks; concurrent submissions are only "
                "serialized within a single process."
            )

        if "*" in self.cors_origins_list:
            warnings_.append("CORS allows any origin")

        return errors, warnings_


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
