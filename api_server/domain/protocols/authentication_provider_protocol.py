"""AuthenticationProviderProtocol - bearer credential verification.

The auth middleware extracts the bearer token and delegates verification
to an implementation of this protocol. The provider knows nothing about
HTTP; the middleware knows nothing about token formats.

Implementations:
    - JWTAuthenticationProvider (infrastructure/security)
    - Any object with a matching ``verify_token`` coroutine (e.g. a
      third-party identity service client)
"""

from typing import Protocol


class AuthenticationFailedError(Exception):
    """Raised by providers when a token cannot be verified."""


class AuthenticationProviderProtocol(Protocol):
    """Verifies a bearer token and returns the authenticated user ID."""

    async def verify_token(self, token: str) -> str:
        """Verify a bearer token.

        Args:
            token: Raw token (without the ``Bearer`` scheme).

        Returns:
            str: Authenticated user identifier.

        Raises:
            AuthenticationFailedError: If the token is invalid or expired.
                Implementations may raise other exceptions for transport
                failures; the auth middleware treats every exception the
                same way.
        """
        ...
