"""Immutable per-request view threaded through the middleware chain.

ServerRequest wraps the Starlette request with the state the dispatch layer
adds while the request travels inward:

- ``authenticated_user_id``: attached by the auth middleware
- ``path_parameters``: attached by route resolution
- ``body``: attached once the body has been read (bounded by max size)

Each ``with_*`` method returns a new value; middlewares pass the new value
to ``next``. Nothing about the request is stored in ambient state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from types import MappingProxyType

from starlette.datastructures import Headers
from starlette.exceptions import HTTPException
from starlette.requests import Request

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ServerRequest:
    """Request value seen by middlewares and dispatch units.

    Attributes:
        raw: Underlying Starlette request (headers, URL, body stream).
        authenticated_user_id: Identity attached by the auth middleware.
        path_parameters: Percent-decoded path parameters of the matched route.
        body: Buffered body bytes, None until read.
    """

    raw: Request
    authenticated_user_id: str | None = None
    path_parameters: Mapping[str, str] = field(default=_EMPTY)
    body: bytes | None = None

    @property
    def method(self) -> str:
        return self.raw.method

    @property
    def headers(self) -> Headers:
        """Case-insensitive request headers."""
        return self.raw.headers

    @property
    def path(self) -> str:
        """Decoded request path (for logging)."""
        return self.raw.url.path

    @property
    def raw_path(self) -> str:
        """Request path exactly as sent, percent-encoding intact."""
        raw = self.raw.scope.get("raw_path")
        if raw:
            return raw.split(b"?", 1)[0].decode("latin-1")
        return self.raw.scope["path"]

    @property
    def query_string(self) -> str:
        """Raw query string without the leading ``?``."""
        return self.raw.scope.get("query_string", b"").decode("latin-1")

    def with_identity(self, user_id: str) -> ServerRequest:
        return replace(self, authenticated_user_id=user_id)

    def with_path_parameters(self, parameters: Mapping[str, str]) -> ServerRequest:
        return replace(self, path_parameters=MappingProxyType(dict(parameters)))

    def with_body(self, body: bytes) -> ServerRequest:
        return replace(self, body=body)

    async def read_body(self, max_size: int) -> bytes:
        """Read the whole body, refusing bodies larger than ``max_size``.

        Args:
            max_size: Maximum accepted size in bytes.

        Returns:
            bytes: Body bytes (empty when the request has no body).

        Raises:
            HTTPException: 413 if the declared or actual size exceeds the limit.
        """
        if self.body is not None:
            return self.body

        declared = self.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > max_size:
            raise _too_large(max_size)

        chunks: list[bytes] = []
        received = 0
        async for chunk in self.raw.stream():
            received += len(chunk)
            if received > max_size:
                raise _too_large(max_size)
            chunks.append(chunk)
        return b"".join(chunks)


def _too_large(max_size: int) -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
        detail=f"Request body exceeds {max_size} bytes",
    )
