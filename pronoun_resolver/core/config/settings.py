"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
pronoun resolver. All configuration is centralized here to ensure
consistency across modules.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pronoun_resolver.core.config.constants import (
    COALESCE_WINDOW_SECONDS,
    LOOKUP_MAX_RETRIES,
    LOOKUP_RETRY_BASE_DELAY,
    LOOKUP_RETRY_MAX_DELAY,
    LOOKUP_TIMEOUT_SECONDS,
    OVERRIDE_INDEX_KEY,
    OVERRIDE_KEY_PREFIX,
)


class LookupSettings(BaseSettings):
    """
    Remote lookup (PronounDB) configuration.

    The transport owns its own timeout and retry budget; once both are
    exhausted the failure is reported to the dispatcher, which falls back
    to the "no value" sentinel for the whole batch.
    """

    PRONOUNDB_BASE_URL: str = Field(default="https://pronoundb.org", description="PronounDB base URL")
    PRONOUNDB_PLATFORM: str = Field(default="discord", description="Platform the ids belong to")
    PRONOUNDB_SOURCE: str = Field(default="pronoun-resolver/1.0.0", description="X-PronounDB-Source header")
    LOOKUP_TIMEOUT: float = Field(default=LOOKUP_TIMEOUT_SECONDS, gt=0, le=60, description="Request timeout")
    LOOKUP_MAX_RETRIES: int = Field(default=LOOKUP_MAX_RETRIES, ge=1, le=10, description="Attempts per batch")
    LOOKUP_RETRY_BASE_DELAY: float = Field(default=LOOKUP_RETRY_BASE_DELAY, ge=0, description="Initial backoff")
    LOOKUP_RETRY_MAX_DELAY: float = Field(default=LOOKUP_RETRY_MAX_DELAY, ge=0, description="Maximum backoff")
    LOOKUP_MAX_CONNECTIONS: int = Field(default=10, ge=1, le=100, description="HTTP pool size")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CoalescerSettings(BaseSettings):
    """
    Request coalescing configuration.

    A longer window produces bigger batches at the cost of added latency
    for every caller in the burst.
    """

    COALESCE_WINDOW_SECONDS: float = Field(
        default=COALESCE_WINDOW_SECONDS, gt=0, description="Quiescence interval before dispatch"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class PersistenceSettings(BaseSettings):
    """
    Durable override storage configuration.
    """

    PERSISTENCE_BACKEND: Literal["memory", "redis"] = Field(default="memory", description="Override store")
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=20, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    OVERRIDE_KEY_PREFIX: str = Field(default=OVERRIDE_KEY_PREFIX, description="Override record key prefix")
    OVERRIDE_INDEX_KEY: str = Field(default=OVERRIDE_INDEX_KEY, description="Override index record key")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class DisplaySettings(BaseSettings):
    """
    Read-only configuration supplied to the presentation layer.
    """

    PRONOUNS_FORMAT: Literal["LOWERCASE", "CAPITALIZED"] = Field(
        default="LOWERCASE", description="Display style for resolved pronouns"
    )
    SHOW_IN_PROFILE: bool = Field(default=True, description="Show pronouns in profiles")
    SHOW_SELF: bool = Field(default=True, description="Show pronouns on the viewer's own profile")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from pronoun_resolver.core.config.settings import get_settings

        settings = get_settings()
        window = settings.coalescer.COALESCE_WINDOW_SECONDS
        base_url = settings.lookup.PRONOUNDB_BASE_URL
    """

    # Lookup settings
    PRONOUNDB_BASE_URL: str = Field(default="https://pronoundb.org", description="PronounDB base URL")
    PRONOUNDB_PLATFORM: str = Field(default="discord", description="Platform the ids belong to")
    PRONOUNDB_SOURCE: str = Field(default="pronoun-resolver/1.0.0", description="X-PronounDB-Source header")
    LOOKUP_TIMEOUT: float = Field(default=LOOKUP_TIMEOUT_SECONDS, gt=0, le=60, description="Request timeout")
    LOOKUP_MAX_RETRIES: int = Field(default=LOOKUP_MAX_RETRIES, ge=1, le=10, description="Attempts per batch")
    LOOKUP_RETRY_BASE_DELAY: float = Field(default=LOOKUP_RETRY_BASE_DELAY, ge=0, description="Initial backoff")
    LOOKUP_RETRY_MAX_DELAY: float = Field(default=LOOKUP_RETRY_MAX_DELAY, ge=0, description="Maximum backoff")
    LOOKUP_MAX_CONNECTIONS: int = Field(default=10, ge=1, le=100, description="HTTP pool size")

    # Coalescer settings
    COALESCE_WINDOW_SECONDS: float = Field(
        default=COALESCE_WINDOW_SECONDS, gt=0, description="Quiescence interval before dispatch"
    )

    # Persistence settings
    PERSISTENCE_BACKEND: Literal["memory", "redis"] = Field(default="memory", description="Override store")
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=20, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    OVERRIDE_KEY_PREFIX: str = Field(default=OVERRIDE_KEY_PREFIX, description="Override record key prefix")
    OVERRIDE_INDEX_KEY: str = Field(default=OVERRIDE_INDEX_KEY, description="Override index record key")

    # Display settings
    PRONOUNS_FORMAT: Literal["LOWERCASE", "CAPITALIZED"] = Field(
        default="LOWERCASE", description="Display style for resolved pronouns"
    )
    SHOW_IN_PROFILE: bool = Field(default=True, description="Show pronouns in profiles")
    SHOW_SELF: bool = Field(default=True, description="Show pronouns on the viewer's own profile")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("PRONOUNS_FORMAT", mode="before")
    @classmethod
    def normalize_pronouns_format(cls, v):
        """Accept the display style in any case."""
        return v.upper() if isinstance(v, str) else v

    # Grouped views
    @property
    def lookup(self) -> "LookupSettings":
        """Get remote lookup settings."""
        return LookupSettings(
            PRONOUNDB_BASE_URL=self.PRONOUNDB_BASE_URL,
            PRONOUNDB_PLATFORM=self.PRONOUNDB_PLATFORM,
            PRONOUNDB_SOURCE=self.PRONOUNDB_SOURCE,
            LOOKUP_TIMEOUT=self.LOOKUP_TIMEOUT,
            LOOKUP_MAX_RETRIES=self.LOOKUP_MAX_RETRIES,
            LOOKUP_RETRY_BASE_DELAY=self.LOOKUP_RETRY_BASE_DELAY,
            LOOKUP_RETRY_MAX_DELAY=self.LOOKUP_RETRY_MAX_DELAY,
            LOOKUP_MAX_CONNECTIONS=self.LOOKUP_MAX_CONNECTIONS,
        )

    @property
    def coalescer(self) -> "CoalescerSettings":
        """Get request coalescing settings."""
        return CoalescerSettings(COALESCE_WINDOW_SECONDS=self.COALESCE_WINDOW_SECONDS)

    @property
    def persistence(self) -> "PersistenceSettings":
        """Get override persistence settings."""
        return PersistenceSettings(
            PERSISTENCE_BACKEND=self.PERSISTENCE_BACKEND,
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            OVERRIDE_KEY_PREFIX=self.OVERRIDE_KEY_PREFIX,
            OVERRIDE_INDEX_KEY=self.OVERRIDE_INDEX_KEY,
        )

    @property
    def display(self) -> "DisplaySettings":
        """Get presentation settings."""
        return DisplaySettings(
            PRONOUNS_FORMAT=self.PRONOUNS_FORMAT,
            SHOW_IN_PROFILE=self.SHOW_IN_PROFILE,
            SHOW_SELF=self.SHOW_SELF,
        )

    @property
    def logging(self) -> "LoggingSettings":
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
