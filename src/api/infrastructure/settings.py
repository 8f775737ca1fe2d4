"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        BOTNORREA_DB_HOST: Database host (default: localhost)
        BOTNORREA_DB_PORT: Database port (default: 5432)
        BOTNORREA_DB_DATABASE: Database name (default: botnorrea)
        BOTNORREA_DB_USERNAME: Database user (default: botnorrea)
        BOTNORREA_DB_PASSWORD: Database password (required in production)
        BOTNORREA_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        BOTNORREA_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="BOTNORREA_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="botnorrea", description="Database name")
    username: str = Field(default="botnorrea", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class DirectorySettings(BaseSettings):
    """User directory settings.

    Environment variables:
        BOTNORREA_DIRECTORY_TABLE_NAME: Table holding directory records (default: users)
        BOTNORREA_DIRECTORY_STORE_BACKEND: "postgres" or "memory" (default: postgres)
    """

    model_config = SettingsConfigDict(
        env_prefix="BOTNORREA_DIRECTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    table_name: str = Field(
        default="users",
        description="Name of the table holding directory records",
    )
    store_backend: Literal["postgres", "memory"] = Field(
        default="postgres",
        description="Record store implementation backing the directory",
    )

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Table name is interpolated into DDL, so only plain identifiers pass."""
        v = v.strip()
        if not _TABLE_NAME_PATTERN.match(v):
            raise ValueError(
                "table_name must start with a letter or underscore and contain "
                "only letters, digits and underscores (max 63 chars)"
            )
        return v


class TelegramSettings(BaseSettings):
    """Telegram Bot API settings.

    Environment variables:
        BOTNORREA_TELEGRAM_BOT_TOKEN: Bot token issued by BotFather
        BOTNORREA_TELEGRAM_API_BASE_URL: Bot API base URL (default: https://api.telegram.org)
        BOTNORREA_TELEGRAM_REQUEST_TIMEOUT_SECONDS: HTTP timeout (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="BOTNORREA_TELEGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bot_token: SecretStr = Field(
        default=SecretStr(""),
        description="Telegram bot token",
    )
    api_base_url: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for Bot API requests",
        gt=0,
        le=60,
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError("api_base_url must use http or https")
        return s


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Botnorrea API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_directory_settings() -> DirectorySettings:
    """Get cached user directory settings."""
    return DirectorySettings()


@lru_cache
def get_telegram_settings() -> TelegramSettings:
    """Get cached Telegram settings."""
    return TelegramSettings()
