"""Wire-level error codes (machine-readable).

These are the symbolic codes carried in the ``errorCode`` field of every
JSON error body. Service-specific errors are free to use their own codes
(e.g. ``ITEM_NOT_FOUND``); the codes below cover the errors raised by the
dispatch layer itself.

Categories:
- Client errors (BAD_REQUEST, NOT_FOUND, METHOD_NOT_ALLOWED, ...)
- Authentication/authorization errors (UNAUTHORIZED, FORBIDDEN)
- Server errors (INTERNAL_ERROR)
- Transport aborts (HTTP_ABORT)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Wire-level error codes.

    Values are upper snake case and are sent to clients verbatim.
    """

    # Client errors
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

    # Authentication / authorization errors
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Fallback for aborts raised by the HTTP engine (oversized body, etc.)
    HTTP_ABORT = "HTTP_ABORT"
