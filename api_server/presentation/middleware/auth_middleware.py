"""Bearer token authentication middleware.

Extracts ``Authorization: Bearer <token>`` (scheme matched
case-insensitively), verifies the token with the configured provider and
attaches the resulting user ID to the request.

This middleware never rejects a request. A missing header, a non-bearer
scheme or a failed verification all forward the request unauthenticated;
each endpoint's declared auth requirement decides whether that is a 401.
"""

from api_server.core.constants import AUTHORIZATION_HEADER, BEARER_PREFIX
from api_server.domain.protocols.authentication_provider_protocol import (
    AuthenticationProviderProtocol,
)
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import ServerResponse
from api_server.presentation.middleware.chain import Next


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a bearer Authorization header value, if any."""
    if authorization is None:
        return None
    if authorization[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX.lower():
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


class AuthMiddleware:
    """Attaches the verified bearer identity to the request."""

    def __init__(
        self, provider: AuthenticationProviderProtocol, logger: LoggerProtocol
    ) -> None:
        self._provider = provider
        self._logger = logger

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse:
        token = extract_bearer_token(request.headers.get(AUTHORIZATION_HEADER))
        if token is None:
            return await next(request)

        try:
            user_id = await self._provider.verify_token(token)
        except Exception as exc:
            self._logger.warning(
                "Token verification failed",
                error_type=type(exc).__name__,
                error_message=str(exc),
                method=request.method,
                path=request.path,
            )
            return await next(request)

        self._logger.debug("User authenticated", user_id=user_id)
        return await next(request.with_identity(user_id))
