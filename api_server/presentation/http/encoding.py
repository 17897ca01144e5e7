"""JSON response encoding.

All JSON bodies (success and error) go through pydantic_core so models are
serialized by alias and datetimes as ISO-8601, with one fixed
configuration.
"""

from typing import Any

import pydantic_core
from starlette import status

from api_server.core.constants import JSON_CONTENT_TYPE
from api_server.core.errors import ErrorResponse
from api_server.presentation.http.response import DataResponse

_JSON_HEADERS = {"Content-Type": JSON_CONTENT_TYPE}


def encode_json(value: Any) -> bytes:
    """Serialize ``value`` to compact JSON bytes.

    Raises:
        pydantic_core.PydanticSerializationError: For non-serializable values
            (a programming error in the handler's declared output).
    """
    return pydantic_core.to_json(value, by_alias=True)


def encode_output(value: Any, status_code: int = status.HTTP_200_OK) -> DataResponse:
    """Encode a handler's return value as a JSON response."""
    return DataResponse.create(status_code, encode_json(value), _JSON_HEADERS)


def no_content() -> DataResponse:
    """Empty-output success: 204 with no body."""
    return DataResponse.create(status.HTTP_204_NO_CONTENT)


def error_response(status_code: int, error: ErrorResponse) -> DataResponse:
    """Encode an error envelope with the given status."""
    return DataResponse.create(int(status_code), error.to_json_bytes(), _JSON_HEADERS)
