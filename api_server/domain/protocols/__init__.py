"""Domain protocols (ports) implemented by infrastructure and services."""

from api_server.domain.protocols.api_service_protocol import (
    APIServiceProtocol,
    EndpointHandler,
)
from api_server.domain.protocols.authentication_provider_protocol import (
    AuthenticationFailedError,
    AuthenticationProviderProtocol,
)
from api_server.domain.protocols.logger_protocol import LoggerProtocol

__all__ = [
    "APIServiceProtocol",
    "AuthenticationFailedError",
    "AuthenticationProviderProtocol",
    "EndpointHandler",
    "LoggerProtocol",
]
