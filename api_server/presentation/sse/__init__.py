"""SSE stream engine."""

from api_server.presentation.sse.stream_engine import (
    SSEStream,
    SSEStreamState,
    build_sse_response,
)

__all__ = ["SSEStream", "SSEStreamState", "build_sse_response"]
