"""Per-request trace ID storage.

The trace middleware sets the ID for the duration of one request; the
logging adapter reads it so every record emitted while serving that request
is correlated. This is diagnostics only: authentication identity is never
stored here.
"""

from contextvars import ContextVar

trace_id_context: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Return the current trace ID.

    Returns None when called outside of request context.

    Returns:
        str | None: The current request trace ID, or None if no active request.
    """
    return trace_id_context.get()
