"""LoggerProtocol definition for structured logging.

Every component of the dispatch layer that logs (auth middleware, error
middleware, SSE engine, server lifecycle) receives a LoggerProtocol rather
than a concrete logger, so tests can pass a MagicMock and production can
swap adapters at the composition root.

Log Levels:
    - DEBUG: Per-request diagnostics (successful token verification)
    - INFO: Lifecycle events (server start, stream completed)
    - WARNING: Degraded requests (token verification failed)
    - ERROR: Operation failed, server continues (handler crash, stream failure)
    - CRITICAL: Server cannot continue

Security:
    - NEVER log bearer tokens or request bodies

Usage:
    from api_server.core.container import get_logger

    logger = get_logger()
    logger.info("Stream completed", event_count=3)
    request_logger = logger.bind(trace_id=trace_id)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls are structured: a constant message plus key-value
    context. Implementations may enrich records with timestamp, level and
    trace correlation.
    """

    def debug(self, message: str, /, **context: Any) -> None: ...

    def info(self, message: str, /, **context: Any) -> None: ...

    def warning(self, message: str, /, **context: Any) -> None: ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None: ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged (immutable pattern).
        """
        ...

    def with_context(self, **context: Any) -> "LoggerProtocol": ...
