"""Buffered and streaming responses behind one interface.

Middlewares see every response as a ServerResponse: a status code, a header
view, and ``with_added_headers()``. There are exactly two variants:

- DataResponse: body fully in memory. Immutable; adding headers returns a
  modified copy.
- StreamResponse: body produced incrementally by a Starlette
  StreamingResponse. Adding headers mutates the wrapped response in place
  and returns the same object; the body iterator is never touched.

So an outer middleware (CORS, trace) can decorate an in-flight SSE stream
without buffering it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol, runtime_checkable

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response, StreamingResponse


@runtime_checkable
class ServerResponse(Protocol):
    """Uniform view over buffered and streaming responses."""

    @property
    def status_code(self) -> int: ...

    @property
    def headers(self) -> Headers: ...

    def with_added_headers(self, headers: Mapping[str, str]) -> ServerResponse:
        """Return a response carrying ``headers`` in addition to its own.

        Existing headers with the same (case-insensitive) name are replaced.
        """
        ...

    def to_starlette(self) -> Response:
        """Return the Starlette response to send on the wire."""
        ...


@dataclass(frozen=True, slots=True)
class DataResponse:
    """Buffered response.

    Attributes:
        status_code: HTTP status code.
        body: Complete body bytes.
        headers: Response headers (case-insensitive, immutable).
    """

    status_code: int
    body: bytes = b""
    headers: Headers = field(default_factory=Headers)

    @classmethod
    def create(
        cls,
        status_code: int,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
    ) -> DataResponse:
        return cls(status_code=status_code, body=body, headers=Headers(headers=headers))

    def with_added_headers(self, headers: Mapping[str, str]) -> DataResponse:
        merged = MutableHeaders(raw=list(self.headers.raw))
        for name, value in headers.items():
            merged[name] = value
        return replace(self, headers=Headers(raw=merged.raw))

    def to_starlette(self) -> Response:
        response = Response(content=self.body, status_code=self.status_code)
        response.raw_headers.extend(self.headers.raw)
        return response


class StreamResponse:
    """Streaming response wrapping a live Starlette StreamingResponse."""

    __slots__ = ("_response",)

    def __init__(self, response: StreamingResponse) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> MutableHeaders:
        return self._response.headers

    def with_added_headers(self, headers: Mapping[str, str]) -> StreamResponse:
        """Add headers in place and return ``self``."""
        for name, value in headers.items():
            self._response.headers[name] = value
        return self

    def to_starlette(self) -> StreamingResponse:
        return self._response
