"""Centralized constants for internal implementation details.

This module contains constants that are internal implementation details,
NOT environment-specific configuration. For environment-specific settings,
use `api_server/core/config.py` instead.

Categories:
- Prefixes: Standard protocol prefixes
- Headers: Header names read or written by the dispatch layer
- Content types: Media types of produced bodies

Example:
    >>> from api_server.core.constants import BEARER_PREFIX
    >>> header = f"{BEARER_PREFIX}{access_token}"
"""

# =============================================================================
# Prefixes
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens (matched case-insensitively)."""

PATH_PARAMETER_PREFIX: str = ":"
"""Marker that turns a path template segment into a named parameter."""


# =============================================================================
# Headers
# =============================================================================

AUTHORIZATION_HEADER: str = "Authorization"
"""Request header carrying the bearer credential."""

TRACE_ID_HEADER: str = "X-Trace-Id"
"""Request/response header carrying the per-request trace ID."""


# =============================================================================
# Content Types
# =============================================================================

JSON_CONTENT_TYPE: str = "application/json"
"""Content type of buffered JSON bodies (success and error)."""

EVENT_STREAM_CONTENT_TYPE: str = "text/event-stream"
"""Content type of SSE bodies."""
