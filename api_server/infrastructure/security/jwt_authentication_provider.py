"""JWT bearer token verifier (adapter).

This adapter implements AuthenticationProviderProtocol using PyJWT with
HMAC signatures. The ``sub`` claim is the authenticated user ID.

Architecture:
    - Implements AuthenticationProviderProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via the container (only when JWT_SECRET_KEY is configured)

Security:
    - HS256 by default
    - 256-bit secret key minimum
    - Signature and expiration are always verified

Performance:
    - Stateless validation (no database lookup, no network)
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from api_server.domain.protocols.authentication_provider_protocol import (
    AuthenticationFailedError,
)


class JWTAuthenticationProvider:
    """Verifies HMAC-signed JWT bearer tokens.

    Usage:
        provider = JWTAuthenticationProvider(secret_key=settings.jwt_secret_key)
        server.use_auth(provider)
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: str | None = None,
        issuer: str | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            secret_key: Shared HMAC secret. MUST be at least 32 bytes.
            algorithm: JWT signing algorithm (default: HS256).
            audience: Expected ``aud`` claim, verified when set.
            issuer: Expected ``iss`` claim, verified when set.

        Raises:
            ValueError: If secret_key is too short (< 32 bytes).
        """
        if len(secret_key.encode("utf-8")) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._algorithm = algorithm
        self._audience = audience
        self._issuer = issuer

    async def verify_token(self, token: str) -> str:
        """Verify a token and return its subject.

        Args:
            token: Encoded JWT (without the Bearer scheme).

        Returns:
            str: Value of the ``sub`` claim.

        Raises:
            AuthenticationFailedError: If the signature, expiration, audience
                or issuer is invalid, or the token has no subject.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["sub", "exp"]},
            )
        except InvalidTokenError as exc:
            raise AuthenticationFailedError(str(exc)) from exc

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise AuthenticationFailedError("Token subject must be a non-empty string")
        return subject

    def issue_token(
        self,
        user_id: str,
        expires_in: timedelta = timedelta(minutes=15),
        **claims: Any,
    ) -> str:
        """Issue a signed token for ``user_id``.

        Used by tests and development tooling; production tokens normally
        come from an external identity service.

        Args:
            user_id: Subject of the token.
            expires_in: Lifetime of the token.
            **claims: Extra claims to include.

        Returns:
            str: Encoded JWT.
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims,
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        if self._audience is not None:
            payload.setdefault("aud", self._audience)
        if self._issuer is not None:
            payload.setdefault("iss", self._issuer)
        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token
