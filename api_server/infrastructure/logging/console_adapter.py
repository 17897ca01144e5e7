"""Structured stdout logging adapter built on structlog.

Renderer selection:
- use_json=False: colored key/value console output (local development)
- use_json=True: one JSON object per line (testing, CI, log shippers)

Every record carries the ISO-8601 UTC timestamp, the level and, while a
request is in flight, the request's trace ID.

The adapter satisfies LoggerProtocol structurally; it does not inherit it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from api_server.core.trace import get_trace_id


def add_trace_id(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Structlog processor that attaches the current request trace ID."""
    trace_id = get_trace_id()
    if trace_id is not None:
        event_dict.setdefault("trace_id", trace_id)
    return event_dict


def _with_error(error: Exception | None, context: dict[str, Any]) -> dict[str, Any]:
    if error is not None:
        context["error_type"] = type(error).__name__
        context["error_message"] = str(error)
    return context


class ConsoleAdapter:
    """Logger writing structured records to stdout.

    Args:
        use_json (bool): Render JSON lines instead of colored console output.
        level (str): Lowest level name that is emitted (e.g. "DEBUG").
    """

    def __init__(self, *, use_json: bool = False, level: str = "INFO") -> None:
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer(colors=True)
        )
        min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                add_trace_id,
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(min_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )

        self._logger = structlog.get_logger()

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log at ERROR; ``error`` adds error_type and error_message fields."""
        self._logger.error(message, **_with_error(error, context))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log at CRITICAL; ``error`` adds error_type and error_message fields."""
        self._logger.critical(message, **_with_error(error, context))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return a new adapter whose records always include ``context``.

        The receiver is left unchanged.

        Returns:
            ConsoleAdapter: Adapter sharing configuration, with extra context.
        """
        bound = ConsoleAdapter.__new__(ConsoleAdapter)
        bound._logger = self._logger.bind(**context)
        return bound

    def with_context(self, **context: Any) -> ConsoleAdapter:
        """Alias for bind()."""
        return self.bind(**context)
