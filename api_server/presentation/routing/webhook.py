"""Webhook request types.

Webhook routes receive callbacks from other systems (event buses, payment
providers) where the handler needs the headers as much as the body, e.g.
to read a CloudEvents ``ce-type`` or verify a signature header.

- WebhookRequest: JSON body decoded into a declared type, plus headers
- RawWebhookRequest: untouched body bytes, plus headers (any content type)
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from starlette.datastructures import Headers


class WebhookHeaders(Mapping[str, str]):
    """Read-only, case-insensitive header view.

    Names are stored lower-cased; for repeated headers the last value wins.
    """

    __slots__ = ("_storage",)

    def __init__(self, headers: Headers | Mapping[str, str]) -> None:
        items = headers.multi_items() if isinstance(headers, Headers) else headers.items()
        self._storage = {name.lower(): value for name, value in items}

    def __getitem__(self, name: str) -> str:
        return self._storage[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._storage

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    @property
    def all(self) -> dict[str, str]:
        """Copy of every header, keyed by lower-cased name."""
        return dict(self._storage)


@dataclass(frozen=True, slots=True)
class WebhookRequest[T]:
    """Webhook call with a decoded body.

    Attributes:
        body: Body decoded into the route's declared type.
        headers: Request headers.
    """

    body: T
    headers: WebhookHeaders


@dataclass(frozen=True, slots=True)
class RawWebhookRequest:
    """Webhook call with the body left as bytes.

    Attributes:
        body: Raw body bytes.
        headers: Request headers.
    """

    body: bytes
    headers: WebhookHeaders

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

