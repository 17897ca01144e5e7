"""Pytest configuration.

This configuration ensures:
1. Settings load in the testing environment (JSON logging, no .env surprises)
2. Async tests are always marked for pytest-asyncio
3. Shared fixtures for loggers and servers are available everywhere
"""

import inspect
import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

from api_server.core.config import Settings  # noqa: E402
from tests.utils.requests import make_server  # noqa: E402


# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double recording every call (LoggerProtocol methods)."""
    return MagicMock(spec=["debug", "info", "warning", "error", "critical", "bind", "with_context"])


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults only, independent of the process environment."""
    return Settings(_env_file=None, environment="testing")


@pytest.fixture
def server(test_settings: Settings, mock_logger: MagicMock):
    """Bare ServerApplication (error middleware only, no routes)."""
    return make_server(settings=test_settings, logger=mock_logger)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "api: End-to-end tests through the ASGI application")
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
