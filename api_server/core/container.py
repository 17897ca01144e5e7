"""Infrastructure dependency factories.

Application-scoped singletons for the infrastructure services the server
composes at startup:
- Logging (console, JSON in testing/ci)
- Token verification (JWT, only when a secret key is configured)

Adapter selection is centralized here (composition root); the presentation
layer only ever sees the protocols.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from api_server.core.config import settings
from api_server.core.enums import Environment

if TYPE_CHECKING:
    from api_server.domain.protocols.authentication_provider_protocol import (
        AuthenticationProviderProtocol,
    )
    from api_server.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection:
    - development/production: ConsoleAdapter (human-readable)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from api_server.infrastructure.logging.console_adapter import ConsoleAdapter

    use_json = settings.environment in {Environment.TESTING, Environment.CI}
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)


@lru_cache()
def get_authentication_provider() -> "AuthenticationProviderProtocol | None":
    """Return the bearer token verifier singleton.

    Returns None when no ``JWT_SECRET_KEY`` is configured, in which case the
    server runs without an auth middleware and every request is anonymous.

    Returns:
        AuthenticationProviderProtocol | None: JWT verifier or None.
    """
    if settings.jwt_secret_key is None:
        return None

    from api_server.infrastructure.security.jwt_authentication_provider import (
        JWTAuthenticationProvider,
    )

    return JWTAuthenticationProvider(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
