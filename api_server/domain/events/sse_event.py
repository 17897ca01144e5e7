"""Server-Sent Events (SSE) wire types.

This module defines the SSE message format for server-to-client streaming.
SSE events are the wire format sent to clients; handlers produce them and
the SSE stream engine writes them in order.

Architecture:
    - SSEEvent: Immutable dataclass representing one SSE message
    - SSEEvent.comment(): Comment-only message (keep-alives, stream markers)
    - SSEEvent.json(): Message whose data is a JSON-encoded value
    - formatted(): Serialization to SSE wire format (text/event-stream)
    - SSEConstants: Response headers and defaults

Wire Format (SSE spec):
    event: <event_name>
    id: <event_id>
    retry: <reconnect_ms>
    data: <line 1>
    data: <line 2>
    <blank line>

Reference:
    - https://html.spec.whatwg.org/multipage/server-sent-events.html
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pydantic_core

from api_server.core.constants import EVENT_STREAM_CONTENT_TYPE


class SSEEncodingError(Exception):
    """Raised when a value cannot be encoded as SSE event data."""


@dataclass(frozen=True, slots=True, kw_only=True)
class SSEEvent:
    """One Server-Sent Event.

    All fields are optional. Serialization order is fixed: ``event``, ``id``,
    ``retry``, one ``data`` line per newline-separated piece of ``data``, then
    the comment line.

    Attributes:
        data: Event payload; multi-line strings become multiple data lines.
        event: Event name (client listens with addEventListener(name)).
        id: Event ID (sent back by clients as Last-Event-ID).
        retry: Client reconnection delay in milliseconds.
        comment_text: Comment line content (set via SSEEvent.comment()).

    Example:
        >>> SSEEvent(data="Hello").formatted()
        'data: Hello\\n\\n'
        >>> SSEEvent.comment("keepalive").formatted()
        ': keepalive\\n\\n'
    """

    data: str | None = None
    event: str | None = None
    id: str | None = None
    retry: int | None = None
    comment_text: str | None = None

    @classmethod
    def comment(cls, text: str) -> SSEEvent:
        """Create a comment-only event (ignored by EventSource clients)."""
        return cls(comment_text=text)

    @classmethod
    def json(
        cls,
        value: Any,
        *,
        event: str | None = None,
        id: str | None = None,
    ) -> SSEEvent:
        """Create an event whose data is ``value`` encoded as compact JSON.

        Pydantic models are encoded by alias; datetimes as ISO-8601.

        Raises:
            SSEEncodingError: If the value cannot be encoded.
        """
        try:
            data = pydantic_core.to_json(value, by_alias=True).decode("utf-8")
        except (pydantic_core.PydanticSerializationError, UnicodeDecodeError) as exc:
            raise SSEEncodingError(f"Failed to encode value as JSON: {exc}") from exc
        return cls(data=data, event=event, id=id)

    def formatted(self) -> str:
        """Serialize to the SSE wire format.

        Returns:
            str: Event block terminated by a blank line, or a bare newline
                for an event with no fields.
        """
        lines: list[str] = []

        if self.event is not None:
            lines.append(f"event: {self.event}")
        if self.id is not None:
            lines.append(f"id: {self.id}")
        if self.retry is not None:
            lines.append(f"retry: {self.retry}")
        if self.data is not None:
            lines.extend(f"data: {line}" for line in self.data.split("\n"))
        if self.comment_text is not None:
            lines.append(f": {self.comment_text}")

        if not lines:
            return "\n"
        return "\n".join(lines) + "\n\n"

    def encode(self) -> bytes:
        """Serialize to UTF-8 bytes ready for the transport."""
        return self.formatted().encode("utf-8")


class SSEConstants:
    """SSE response headers and defaults."""

    CONTENT_TYPE: ClassVar[str] = EVENT_STREAM_CONTENT_TYPE
    CACHE_CONTROL: ClassVar[str] = "no-cache"
    CONNECTION: ClassVar[str] = "keep-alive"
    NO_BUFFERING: ClassVar[str] = "no"

    DEFAULT_RETRY_MS: ClassVar[int] = 3000
    """Default client reconnection delay in milliseconds."""

    INITIAL_COMMENT: ClassVar[str] = "SSE stream initialized"
    """Comment sent first to flush headers through intermediaries."""

    DEFAULT_HEADERS: ClassVar[dict[str, str]] = {
        "Content-Type": CONTENT_TYPE,
        "Cache-Control": CACHE_CONTROL,
        "Connection": CONNECTION,
        "X-Accel-Buffering": NO_BUFFERING,
    }
