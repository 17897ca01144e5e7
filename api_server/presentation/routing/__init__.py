"""Route registration, resolution and request decoding.

Usage:
    from api_server.presentation.routing import Routes, RouteTable
"""

from api_server.presentation.routing.decode import (
    build_service_context,
    decode_input,
    decode_json_body,
    lenient_service_context,
    parse_query_string,
)
from api_server.presentation.routing.registrar import (
    APIRoutes,
    MountedGroup,
    RouteGroup,
    Routes,
)
from api_server.presentation.routing.route_table import Route, RouteMatch, RouteTable
from api_server.presentation.routing.webhook import (
    RawWebhookRequest,
    WebhookHeaders,
    WebhookRequest,
)

__all__ = [
    "APIRoutes",
    "MountedGroup",
    "RawWebhookRequest",
    "Route",
    "RouteGroup",
    "RouteMatch",
    "RouteTable",
    "Routes",
    "WebhookHeaders",
    "WebhookRequest",
    "build_service_context",
    "decode_input",
    "decode_json_body",
    "lenient_service_context",
    "parse_query_string",
]
