"""Trace middleware to inject a trace_id per request.

- Reuses the client's X-Trace-Id header or generates a UUID4
- Adds the X-Trace-Id response header (buffered and streaming responses)
- Logs one "Request completed" record per request with status and duration
- Exposes get_trace_id() for logging calls outside request handlers
"""

from __future__ import annotations

import time
from uuid import uuid4

from api_server.core.constants import TRACE_ID_HEADER
from api_server.core.trace import get_trace_id, trace_id_context
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import ServerResponse
from api_server.presentation.middleware.chain import Next


class TraceMiddleware:
    """Sets a trace ID for the duration of each request."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse:
        """Intercept a request to set and propagate a trace ID.

        Args:
            request (ServerRequest): Incoming request.
            next (Next): Rest of the chain.

        Returns:
            ServerResponse: Response with X-Trace-Id header added.
        """
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid4())
        token = trace_id_context.set(trace_id)
        started = time.perf_counter()
        try:
            response = await next(request)
            self._logger.info(
                "Request completed",
                method=request.method,
                path=request.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response.with_added_headers({TRACE_ID_HEADER: trace_id})
        finally:
            # Clear context after request to prevent leakage
            trace_id_context.reset(token)


__all__ = ["TraceMiddleware", "get_trace_id"]
