"""Error translation middleware.

The single place where exceptions become wire responses. Four disjoint
categories are caught, each converted to the JSON error envelope
``{"errorCode": ..., "message": ...}``:

    APIContractError   -> its own status, code and message
    HTTPException      -> the abort's status, code HTTP_ABORT, its detail
    DecodeError        -> 400, BAD_REQUEST, description of the failure
    anything else      -> 500, INTERNAL_ERROR, generic message

Middlewares registered before it see the translated response. The server
also installs one outermost when the first registered middleware is not an
error middleware, so no exception reaches the transport as a raw fault.
"""

from starlette.exceptions import HTTPException

from api_server.core.enums import ErrorCode
from api_server.core.errors import (
    APIContractError,
    DecodeError,
    ErrorResponse,
    HTTPError,
)
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.presentation.http.encoding import error_response
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import DataResponse, ServerResponse
from api_server.presentation.middleware.chain import Next

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorMiddleware:
    """Converts every exception raised further in into a JSON error body.

    Args:
        logger: Logger for unexpected failures.
        expose_details: Append the exception text to 500 messages
            (development only; never enable in production).
    """

    def __init__(self, logger: LoggerProtocol, *, expose_details: bool = False) -> None:
        self._logger = logger
        self._expose_details = expose_details

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse:
        try:
            return await next(request)
        except APIContractError as exc:
            return self.contract_error_response(exc)
        except HTTPException as exc:
            return self.abort_response(exc)
        except DecodeError as exc:
            return self.contract_error_response(HTTPError.bad_request(exc.description))
        except Exception as exc:
            self._logger.error(
                "Unhandled error during request",
                error=exc,
                method=request.method,
                path=request.path,
            )
            return self.contract_error_response(self._internal_error(exc))

    @staticmethod
    def contract_error_response(error: APIContractError) -> DataResponse:
        """Encode a contract error with its declared status."""
        return error_response(error.status_code, error.to_error_response())

    @staticmethod
    def abort_response(exc: HTTPException) -> DataResponse:
        """Encode a transport abort, keeping any headers it carries."""
        response = error_response(
            exc.status_code,
            ErrorResponse(error_code=ErrorCode.HTTP_ABORT.value, message=str(exc.detail)),
        )
        if exc.headers:
            response = response.with_added_headers(exc.headers)
        return response

    def _internal_error(self, exc: Exception) -> HTTPError:
        if self._expose_details:
            return HTTPError.internal_error(f"{GENERIC_ERROR_MESSAGE}: {exc}")
        return HTTPError.internal_error(GENERIC_ERROR_MESSAGE)
