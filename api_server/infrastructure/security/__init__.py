"""Security infrastructure adapters.

This package contains security-related infrastructure implementations:
- JWT bearer token verification
"""

from api_server.infrastructure.security.jwt_authentication_provider import (
    JWTAuthenticationProvider,
)

__all__ = ["JWTAuthenticationProvider"]
