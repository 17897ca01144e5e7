"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables (optionally via a ``.env`` file).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Every field has a safe default so the server starts with no configuration

Usage:
    from api_server.core.config import settings

    # Access config
    port = settings.port
    origins = settings.cors_origins

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache
import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from api_server.core.enums import Environment

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*(b|kb|mb|gb)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"b": 1, "kb": 1024, "mb": 1024**2, "gb": 1024**3}


def parse_byte_size(value: int | str) -> int:
    """Parse a byte size given as an int or a string like ``"10mb"``.

    Args:
        value: Number of bytes, or a number with a b/kb/mb/gb suffix.

    Returns:
        int: Size in bytes.

    Raises:
        ValueError: If the string is not a recognised size.
    """
    if isinstance(value, int):
        if value < 0:
            raise ValueError("Byte size must not be negative")
        return value
    match = _SIZE_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid byte size: {value!r}")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[(unit or "b").lower()]


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Loads configuration from environment variables or a ``.env`` file.

    Configuration precedence:
        1. Environment variables
        2. ``.env`` file in the working directory
        3. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=8080,
        description="Server bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="api-server",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Request handling
    max_body_size: int = Field(
        default=1024**2,
        description="Maximum request body size in bytes (accepts suffixes like '10mb')",
    )
    sse_keepalive_seconds: float | None = Field(
        default=None,
        description="Send an SSE keep-alive comment after this many idle seconds (disabled when unset)",
    )

    # CORS configuration
    cors_origins: str = Field(
        default="*",
        validate_default=True,
        description="Allowed CORS origins (comma-separated, '*' for any)",
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow cookies and authentication headers in CORS requests",
    )

    # Security configuration
    jwt_secret_key: str | None = Field(
        default=None,
        description="Secret key for bearer token verification (auth middleware disabled when unset)",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is unknown.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("max_body_size", mode="before")
    @classmethod
    def validate_max_body_size(cls, v: int | str) -> int:
        """
        Accept byte sizes with unit suffixes.

        Args:
            v: Size in bytes or a string such as "10mb".

        Returns:
            int: Size in bytes.
        """
        return parse_byte_size(v)

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> list[str]:
        """
        Parse comma-separated CORS origins.

        Args:
            v: Comma-separated origins string.

        Returns:
            list[str]: List of origin URLs.
        """
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str | None) -> str | None:
        """
        Require at least 32 bytes of key material when a key is configured.

        Args:
            v: Secret key or None.

        Returns:
            str | None: The key unchanged.

        Raises:
            ValueError: If the key is shorter than 32 bytes.
        """
        if v is not None and len(v.encode("utf-8")) < 32:
            raise ValueError("jwt_secret_key must be at least 32 bytes")
        return v

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """
        Check if running in CI environment.

        Returns:
            bool: True if environment is CI, False otherwise.
        """
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
