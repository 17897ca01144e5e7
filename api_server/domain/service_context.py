"""Per-request authentication context passed to handlers.

A ServiceContext is either anonymous or authenticated with a user ID. It is
built once per request by the dispatch layer from the identity the auth
middleware attached to the request and the endpoint's auth requirement, and
then passed to the handler as an explicit argument.
"""

from __future__ import annotations

from dataclasses import dataclass

from api_server.core.errors import HTTPError


@dataclass(frozen=True, slots=True)
class ServiceContext:
    """Anonymous or authenticated request context.

    Attributes:
        authenticated_user_id: User ID, or None for anonymous requests.
    """

    authenticated_user_id: str | None = None

    @classmethod
    def anonymous(cls) -> ServiceContext:
        return cls()

    @classmethod
    def authenticated(cls, user_id: str) -> ServiceContext:
        return cls(authenticated_user_id=user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated_user_id is not None

    def require_user_id(self) -> str:
        """Return the user ID or raise 401 when anonymous.

        Raises:
            HTTPError: 401 UNAUTHORIZED for anonymous contexts.
        """
        if self.authenticated_user_id is None:
            raise HTTPError.unauthorized()
        return self.authenticated_user_id
