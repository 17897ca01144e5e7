"""SSE wire types."""

from api_server.domain.events.sse_event import SSEConstants, SSEEncodingError, SSEEvent

__all__ = ["SSEConstants", "SSEEncodingError", "SSEEvent"]
