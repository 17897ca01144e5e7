"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from api_server.core.enums import ErrorCode, Environment
"""

from api_server.core.enums.environment import Environment
from api_server.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
