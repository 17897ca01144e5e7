"""
Unit tests for configuration management (flat Settings).

Tests cover:
- Settings loading from environment variables
- Environment detection
- Validation (log level, byte sizes, JWT key length, CORS parsing)
- Default values
- Cached singleton behavior
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from api_server.core.config import Settings, get_settings, parse_byte_size
from api_server.core.enums import Environment


def load_settings(**env: str) -> Settings:
    """Build Settings from exactly the given environment (no .env file)."""
    with patch.dict(os.environ, env, clear=True):
        return Settings(_env_file=None)


class TestEnvironmentEnum:
    """Test Environment enum."""

    def test_environment_values(self):
        """Test that all expected environments are defined."""
        assert Environment.DEVELOPMENT == "development"
        assert Environment.TESTING == "testing"
        assert Environment.CI == "ci"
        assert Environment.PRODUCTION == "production"


class TestParseByteSize:
    """Test byte size parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2048, 2048),
            ("512", 512),
            ("16b", 16),
            ("500kb", 500 * 1024),
            ("10mb", 10 * 1024**2),
            ("1GB", 1024**3),
            (" 2 mb ", 2 * 1024**2),
        ],
    )
    def test_valid_sizes(self, value, expected):
        assert parse_byte_size(value) == expected

    @pytest.mark.parametrize("value", ["ten", "10tb", "-5", ""])
    def test_invalid_sizes(self, value):
        with pytest.raises(ValueError):
            parse_byte_size(value)


class TestSettingsDefaults:
    """Test the server starts with no configuration."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.debug is False
        assert settings.port == 8080
        assert settings.log_level == "INFO"
        assert settings.max_body_size == 1024**2
        assert settings.sse_keepalive_seconds is None
        assert settings.cors_origins == ["*"]
        assert settings.cors_allow_credentials is False
        assert settings.jwt_secret_key is None
        assert settings.jwt_algorithm == "HS256"


class TestSettingsValidation:
    """Test Settings field validation."""

    def test_log_level_is_normalized(self):
        assert load_settings(LOG_LEVEL="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            load_settings(LOG_LEVEL="chatty")

    def test_max_body_size_accepts_suffix(self):
        assert load_settings(MAX_BODY_SIZE="10mb").max_body_size == 10 * 1024**2

    def test_cors_origins_parsed_from_comma_list(self):
        settings = load_settings(CORS_ORIGINS="https://a.com, https://b.com,")

        assert settings.cors_origins == ["https://a.com", "https://b.com"]

    def test_short_jwt_secret_rejected(self):
        with pytest.raises(ValidationError):
            load_settings(JWT_SECRET_KEY="too-short")

    def test_jwt_secret_accepted(self):
        key = "k" * 32

        assert load_settings(JWT_SECRET_KEY=key).jwt_secret_key == key


class TestEnvironmentDetection:
    """Test is_* convenience properties."""

    @pytest.mark.parametrize(
        ("value", "attribute"),
        [
            ("development", "is_development"),
            ("testing", "is_testing"),
            ("ci", "is_ci"),
            ("production", "is_production"),
        ],
    )
    def test_exactly_one_flag(self, value, attribute):
        settings = load_settings(ENVIRONMENT=value)
        flags = {
            name: getattr(settings, name)
            for name in ("is_development", "is_testing", "is_ci", "is_production")
        }

        assert flags.pop(attribute) is True
        assert not any(flags.values())


class TestGetSettings:
    """Test cached singleton behavior."""

    def test_returns_cached_instance(self):
        assert get_settings() is get_settings()
