"""Core errors package.

Exports all core-level error classes for convenient importing.

Usage:
    from api_server.core.errors import APIContractError, HTTPError, DecodeError
"""

from api_server.core.errors.api_error import APIContractError, HTTPError
from api_server.core.errors.decode_error import DecodeError, DecodeErrorKind
from api_server.core.errors.error_response import ErrorResponse

__all__ = [
    "APIContractError",
    "HTTPError",
    "DecodeError",
    "DecodeErrorKind",
    "ErrorResponse",
]
