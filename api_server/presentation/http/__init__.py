"""HTTP primitives of the dispatch layer."""

from api_server.presentation.http.encoding import (
    encode_json,
    encode_output,
    error_response,
    no_content,
)
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import (
    DataResponse,
    ServerResponse,
    StreamResponse,
)

__all__ = [
    "DataResponse",
    "ServerRequest",
    "ServerResponse",
    "StreamResponse",
    "encode_json",
    "encode_output",
    "error_response",
    "no_content",
]
