"""Contract errors raised by handlers and by the dispatch layer.

APIContractError is the base class for every error that self-describes its
HTTP status, its wire error code and its message. Handlers raise these; the
error middleware is the only place they are caught and converted into a
JSON error body.

Architecture:
- APIContractError: base exception (status_code, error_code, message)
- HTTPError: generic concrete error with one factory per common status

Usage:
    from api_server.core.errors import APIContractError, HTTPError

    class ItemNotFoundError(APIContractError):
        status_code = 404
        error_code = "ITEM_NOT_FOUND"

        def __init__(self, item_id: str) -> None:
            super().__init__(f"Item not found: {item_id}")

    raise HTTPError.unauthorized()
"""

from __future__ import annotations

from starlette import status

from api_server.core.enums import ErrorCode
from api_server.core.errors.error_response import ErrorResponse


class APIContractError(Exception):
    """Base class for errors that map directly onto an HTTP response.

    Subclasses either override the class attributes or pass explicit values
    to ``__init__``.

    Attributes:
        status_code: HTTP status code sent to the client.
        error_code: Symbolic error code sent as ``errorCode``.
        message: Human-readable message sent as ``message``.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = ErrorCode.INTERNAL_ERROR.value
    message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        error_code: str | ErrorCode | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = (
                error_code.value if isinstance(error_code, ErrorCode) else error_code
            )
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Build the wire-level error body for this error.

        Returns:
            ErrorResponse: Envelope with ``errorCode`` and ``message``.
        """
        return ErrorResponse(error_code=self.error_code, message=self.message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIContractError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.status_code == other.status_code
            and self.error_code == other.error_code
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.status_code, self.error_code, self.message))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"error_code={self.error_code!r}, message={self.message!r})"
        )


class HTTPError(APIContractError):
    """Generic contract error with factories for the common statuses."""

    @classmethod
    def bad_request(cls, message: str = "Bad request") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=ErrorCode.BAD_REQUEST,
        )

    @classmethod
    def unauthorized(cls, message: str = "Authentication required") -> HTTPError:
        """Error raised when a required-auth endpoint sees no identity."""
        return cls(
            message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=ErrorCode.UNAUTHORIZED,
        )

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=ErrorCode.FORBIDDEN,
        )

    @classmethod
    def not_found(cls, message: str = "Not found") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=ErrorCode.NOT_FOUND,
        )

    @classmethod
    def method_not_allowed(cls, message: str = "Method not allowed") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            error_code=ErrorCode.METHOD_NOT_ALLOWED,
        )

    @classmethod
    def conflict(cls, message: str = "Conflict") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_409_CONFLICT,
            error_code=ErrorCode.CONFLICT,
        )

    @classmethod
    def too_many_requests(cls, message: str = "Too many requests") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code=ErrorCode.TOO_MANY_REQUESTS,
        )

    @classmethod
    def internal_error(cls, message: str = "Internal server error") -> HTTPError:
        return cls(
            message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=ErrorCode.INTERNAL_ERROR,
        )
