"""CORS middleware for buffered and streaming responses.

Preflight (``OPTIONS``) requests are answered with 204 and the CORS
headers without reaching any route. Every other request is forwarded and the
same headers are added to whatever comes back; streaming responses (SSE) are
decorated in place without buffering their bodies.

Allow-Origin rules:
    - Request has an Origin that is listed, or "*" is listed: echo the Origin
    - Request has no Origin and "*" is listed: "*"
    - Otherwise: header omitted

When the Origin is echoed, "Vary: Origin" is added (merged into any Vary
the route already set) so shared caches key on it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from starlette import status

from api_server.domain.contracts import HTTPMethod
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import DataResponse, ServerResponse
from api_server.presentation.middleware.chain import Next

if TYPE_CHECKING:
    from api_server.core.config import Settings

WILDCARD = "*"


def _default_methods() -> list[str]:
    return [
        HTTPMethod.GET.value,
        HTTPMethod.POST.value,
        HTTPMethod.PUT.value,
        HTTPMethod.PATCH.value,
        HTTPMethod.DELETE.value,
        HTTPMethod.OPTIONS.value,
    ]


def _default_headers() -> list[str]:
    return ["Accept", "Authorization", "Content-Type", "Origin", "X-Requested-With"]


def _merge_vary(existing: str, added: str) -> str:
    names = {name.strip().lower() for name in existing.split(",")}
    if WILDCARD in names or added.lower() in names:
        return existing
    return f"{existing}, {added}"


@dataclass(frozen=True, kw_only=True)
class CORSConfiguration:
    """Static CORS policy.

    Attributes:
        allowed_origins: Exact origins, or "*" for any.
        allowed_methods: Methods listed in Access-Control-Allow-Methods.
        allowed_headers: Headers listed in Access-Control-Allow-Headers.
        allow_credentials: Send Access-Control-Allow-Credentials: true.
        max_age: Preflight cache lifetime in seconds (None omits the header).
        exposed_headers: Headers listed in Access-Control-Expose-Headers.
    """

    allowed_origins: Sequence[str] = field(default_factory=lambda: [WILDCARD])
    allowed_methods: Sequence[str] = field(default_factory=_default_methods)
    allowed_headers: Sequence[str] = field(default_factory=_default_headers)
    allow_credentials: bool = False
    max_age: int | None = 600
    exposed_headers: Sequence[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings) -> CORSConfiguration:
        return cls(
            allowed_origins=list(settings.cors_origins),
            allow_credentials=settings.cors_allow_credentials,
        )

    def allows_origin(self, origin: str) -> bool:
        return WILDCARD in self.allowed_origins or origin in self.allowed_origins

    def headers_for(self, origin: str | None) -> dict[str, str]:
        """Compute the CORS response headers for a request Origin."""
        headers: dict[str, str] = {}

        if origin is not None:
            if self.allows_origin(origin):
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"
        elif WILDCARD in self.allowed_origins:
            headers["Access-Control-Allow-Origin"] = WILDCARD

        headers["Access-Control-Allow-Methods"] = ", ".join(self.allowed_methods)
        if self.allowed_headers:
            headers["Access-Control-Allow-Headers"] = ", ".join(self.allowed_headers)
        if self.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        if self.max_age is not None:
            headers["Access-Control-Max-Age"] = str(self.max_age)
        if self.exposed_headers:
            headers["Access-Control-Expose-Headers"] = ", ".join(self.exposed_headers)

        return headers


class CORSMiddleware:
    """Applies a CORSConfiguration to every request."""

    def __init__(self, configuration: CORSConfiguration | None = None) -> None:
        self.configuration = configuration or CORSConfiguration()

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse:
        cors_headers = self.configuration.headers_for(request.headers.get("origin"))

        if request.method == HTTPMethod.OPTIONS.value:
            return DataResponse.create(status.HTTP_204_NO_CONTENT, headers=cors_headers)

        response = await next(request)
        existing_vary = response.headers.get("vary")
        if existing_vary and "Vary" in cors_headers:
            cors_headers["Vary"] = _merge_vary(existing_vary, cors_headers["Vary"])
        return response.with_added_headers(cors_headers)
