"""Middleware chain and built-in middlewares.

Usage:
    from api_server.presentation.middleware import CORSMiddleware, ServerMiddleware
"""

from api_server.presentation.middleware.auth_middleware import AuthMiddleware
from api_server.presentation.middleware.chain import (
    FunctionMiddleware,
    Next,
    ServerMiddleware,
    build_chain,
)
from api_server.presentation.middleware.cors_middleware import (
    CORSConfiguration,
    CORSMiddleware,
)
from api_server.presentation.middleware.error_middleware import ErrorMiddleware
from api_server.presentation.middleware.trace_middleware import TraceMiddleware

__all__ = [
    "AuthMiddleware",
    "CORSConfiguration",
    "CORSMiddleware",
    "ErrorMiddleware",
    "FunctionMiddleware",
    "Next",
    "ServerMiddleware",
    "TraceMiddleware",
    "build_chain",
]
