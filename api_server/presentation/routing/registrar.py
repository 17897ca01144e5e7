"""Route registration.

Builds dispatch units (request -> response callables) and records them in
the server's RouteTable. Registration happens once at startup; after the
server starts serving the table is frozen.

Registration styles:
    Simple routes:  routes.get("health", handler)
    Contracts:      routes.register(ItemsAPI["get_item"], handler)
    Services:       routes.mount(ItemsService())
    Manual group:   routes.mount_group(ItemsAPI).register("get_item", handler)
    SSE:            routes.sse("events", handler)
    Webhooks:       routes.webhook("hooks/orders", body=OrderEvent, handler=handler)

Every contract dispatch unit runs the same pipeline:

    1. decode the typed input (DecodeError -> 400)
    2. build the ServiceContext (401 for required-auth without identity)
    3. call the handler
    4. encode the result (200 JSON, or 204 for EmptyOutput endpoints)

Handler errors are never caught here; the error middleware formats them.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, Awaitable, Callable
from http import HTTPStatus
from typing import Any

from api_server.domain.contracts import APIGroup, EndpointDescriptor, HTTPMethod, PathTemplate
from api_server.domain.events.sse_event import SSEEvent
from api_server.domain.protocols.api_service_protocol import (
    APIServiceProtocol,
    EndpointHandler,
)
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.domain.service_context import ServiceContext
from api_server.presentation.http.encoding import encode_output, no_content
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import DataResponse, ServerResponse
from api_server.presentation.routing.decode import (
    build_service_context,
    decode_input,
    decode_json_body,
    lenient_service_context,
)
from api_server.presentation.routing.route_table import Endpoint, RouteTable
from api_server.presentation.routing.webhook import (
    RawWebhookRequest,
    WebhookHeaders,
    WebhookRequest,
)
from api_server.presentation.sse.stream_engine import build_sse_response

# Handler shapes
type SimpleHandler = Callable[..., Awaitable[Any]]
type StreamHandler = Callable[..., AsyncIterable[SSEEvent] | Awaitable[AsyncIterable[SSEEvent]]]
type WebhookHandler = Callable[[WebhookRequest[Any]], Awaitable[Any]]
type RawWebhookHandler = Callable[[RawWebhookRequest], Awaitable[int]]


# =============================================================================
# Result conversion
# =============================================================================


def simple_result_response(result: Any) -> ServerResponse:
    """Convert a simple route's return value into a response.

    - ServerResponse: returned unchanged
    - None: 204 with no body
    - anything else: 200 JSON
    """
    if isinstance(result, ServerResponse):
        return result
    if result is None:
        return no_content()
    return encode_output(result)


def webhook_result_response(result: Any) -> ServerResponse:
    """Convert a webhook handler's return value into a response.

    An ``int`` (including ``HTTPStatus``) is a status with an empty body;
    any other value is encoded as 200 JSON.
    """
    if isinstance(result, int) and not isinstance(result, bool):
        return DataResponse.create(int(result))
    return encode_output(result)


async def _open_stream(result: Any) -> AsyncIterable[SSEEvent]:
    # Handlers may be async generator functions or coroutines returning one
    if inspect.isawaitable(result):
        result = await result
    return result


# =============================================================================
# Registrars
# =============================================================================


class Routes:
    """Root route registrar.

    Args:
        table: Route table the dispatch units are added to.
        logger: Logger handed to SSE streams.
        sse_keepalive_interval: Keep-alive interval for SSE routes (seconds).
        prefix: Path prefix of every route registered through this object.
    """

    def __init__(
        self,
        table: RouteTable,
        logger: LoggerProtocol,
        *,
        sse_keepalive_interval: float | None = None,
        prefix: PathTemplate | None = None,
    ) -> None:
        self._table = table
        self._logger = logger
        self._sse_keepalive_interval = sse_keepalive_interval
        self.prefix = prefix or PathTemplate()

    @property
    def table(self) -> RouteTable:
        return self._table

    def _add(
        self,
        method: HTTPMethod,
        template: PathTemplate,
        endpoint: Endpoint,
        *,
        name: str | None = None,
    ) -> None:
        self._table.add(method, self.prefix.join(template), endpoint, name=name)

    # -------------------------------------------------------------------------
    # Simple routes
    # -------------------------------------------------------------------------

    def route(
        self,
        method: HTTPMethod,
        path: str,
        handler: SimpleHandler,
        *,
        pass_context: bool = False,
    ) -> Routes:
        """Register a handler without a contract.

        The handler is called with no arguments, or with the (lenient)
        ServiceContext when ``pass_context`` is set.
        """

        async def endpoint(request: ServerRequest) -> ServerResponse:
            if pass_context:
                result = await handler(lenient_service_context(request))
            else:
                result = await handler()
            return simple_result_response(result)

        self._add(method, PathTemplate.parse(path), endpoint)
        return self

    def get(self, path: str, handler: SimpleHandler, *, pass_context: bool = False) -> Routes:
        return self.route(HTTPMethod.GET, path, handler, pass_context=pass_context)

    def post(self, path: str, handler: SimpleHandler, *, pass_context: bool = False) -> Routes:
        return self.route(HTTPMethod.POST, path, handler, pass_context=pass_context)

    def put(self, path: str, handler: SimpleHandler, *, pass_context: bool = False) -> Routes:
        return self.route(HTTPMethod.PUT, path, handler, pass_context=pass_context)

    def patch(self, path: str, handler: SimpleHandler, *, pass_context: bool = False) -> Routes:
        return self.route(HTTPMethod.PATCH, path, handler, pass_context=pass_context)

    def delete(self, path: str, handler: SimpleHandler, *, pass_context: bool = False) -> Routes:
        return self.route(HTTPMethod.DELETE, path, handler, pass_context=pass_context)

    # -------------------------------------------------------------------------
    # Grouping
    # -------------------------------------------------------------------------

    def group(self, *path: str) -> RouteGroup:
        """Return a registrar whose routes live under ``path``."""
        return RouteGroup(
            self._table,
            self._logger,
            sse_keepalive_interval=self._sse_keepalive_interval,
            prefix=self.prefix.join(PathTemplate.parse(*path)),
        )

    # -------------------------------------------------------------------------
    # Contract endpoints
    # -------------------------------------------------------------------------

    def register(self, descriptor: EndpointDescriptor, handler: EndpointHandler) -> Routes:
        """Bind a handler to an endpoint contract.

        Args:
            descriptor: Endpoint contract (bound to its group).
            handler: ``async handler(input, context)``. Its return value is
                encoded as 200 JSON, or discarded for EmptyOutput endpoints,
                which answer 204.

        Raises:
            ValueError: If the input declares path parameters the template
                lacks, or the route clashes with an existing one.
        """
        descriptor.check_path_parameters()

        async def endpoint(request: ServerRequest) -> ServerResponse:
            input = decode_input(descriptor, request)
            context = build_service_context(descriptor, request)
            output = await handler(input, context)
            if descriptor.returns_empty:
                return no_content()
            return encode_output(output)

        self._add(descriptor.method, descriptor.path_template, endpoint, name=descriptor.name)
        return self

    def mount_group(self, group: APIGroup) -> MountedGroup:
        """Start registering ``group``'s endpoints one by one."""
        return MountedGroup(self, group)

    def mount(self, service: APIServiceProtocol) -> APIRoutes:
        """Register every endpoint of ``service.group`` with the service's handlers.

        Raises:
            ValueError: If the service has no handler for an endpoint, or a
                handler for an endpoint the group does not declare.
        """
        group = service.group
        handlers = dict(service.handlers())

        unknown = set(handlers) - set(group.endpoints)
        if unknown:
            raise ValueError(
                f"Service for '{group.name}' has handlers for unknown endpoints: {sorted(unknown)}"
            )
        missing = [descriptor.name for descriptor in group if descriptor.name not in handlers]
        if missing:
            raise ValueError(
                f"Service for '{group.name}' has no handler for '{missing[0]}'"
            )
        for descriptor in group:
            self.register(descriptor, handlers[descriptor.name])
        return APIRoutes(self, service)

    # -------------------------------------------------------------------------
    # Server-Sent Events
    # -------------------------------------------------------------------------

    def _stream_response(self, events: AsyncIterable[SSEEvent]) -> ServerResponse:
        return build_sse_response(
            events,
            logger=self._logger,
            keepalive_interval=self._sse_keepalive_interval,
        )

    def sse(self, path: str, handler: StreamHandler, *, pass_context: bool = False) -> Routes:
        """Register a GET SSE route.

        The handler is called with no arguments, or with the (lenient)
        ServiceContext when ``pass_context`` is set, and returns an async
        iterable of SSEEvent.
        """

        async def endpoint(request: ServerRequest) -> ServerResponse:
            if pass_context:
                events = await _open_stream(handler(lenient_service_context(request)))
            else:
                events = await _open_stream(handler())
            return self._stream_response(events)

        self._add(HTTPMethod.GET, PathTemplate.parse(path), endpoint)
        return self

    def post_sse(
        self,
        path: str,
        handler: StreamHandler,
        *,
        body: type[Any] | None = None,
        pass_context: bool = False,
    ) -> Routes:
        """Register a POST SSE route.

        With ``body`` set, the JSON body is decoded into that type and passed
        as the first argument (decode failures answer 400 before the stream
        opens). The context follows when ``pass_context`` is set.
        """

        async def endpoint(request: ServerRequest) -> ServerResponse:
            arguments: list[Any] = []
            if body is not None:
                arguments.append(decode_json_body(body, request.body))
            if pass_context:
                arguments.append(lenient_service_context(request))
            events = await _open_stream(handler(*arguments))
            return self._stream_response(events)

        self._add(HTTPMethod.POST, PathTemplate.parse(path), endpoint)
        return self

    def register_stream(
        self,
        descriptor: EndpointDescriptor,
        handler: Callable[[Any, ServiceContext], Any],
    ) -> Routes:
        """Bind an endpoint contract to an SSE stream.

        Auth gating and input decoding run as for ``register``; the handler
        returns the event source instead of an output value.
        """
        descriptor.check_path_parameters()

        async def endpoint(request: ServerRequest) -> ServerResponse:
            input = decode_input(descriptor, request)
            context = build_service_context(descriptor, request)
            events = await _open_stream(handler(input, context))
            return self._stream_response(events)

        self._add(descriptor.method, descriptor.path_template, endpoint, name=descriptor.name)
        return self

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    def webhook(self, path: str, *, body: type[Any], handler: WebhookHandler) -> Routes:
        """Register a POST webhook with a JSON body decoded into ``body``."""

        async def endpoint(request: ServerRequest) -> ServerResponse:
            webhook_request = WebhookRequest(
                body=decode_json_body(body, request.body),
                headers=WebhookHeaders(request.headers),
            )
            return webhook_result_response(await handler(webhook_request))

        self._add(HTTPMethod.POST, PathTemplate.parse(path), endpoint)
        return self

    def webhook_raw(self, path: str, handler: RawWebhookHandler) -> Routes:
        """Register a POST webhook receiving the body as raw bytes."""

        async def endpoint(request: ServerRequest) -> ServerResponse:
            webhook_request = RawWebhookRequest(
                body=request.body or b"",
                headers=WebhookHeaders(request.headers),
            )
            status_code = await handler(webhook_request)
            return DataResponse.create(int(status_code or HTTPStatus.OK))

        self._add(HTTPMethod.POST, PathTemplate.parse(path), endpoint)
        return self


class RouteGroup(Routes):
    """Registrar scoped to a path prefix (created by ``Routes.group``)."""


# =============================================================================
# Mount results
# =============================================================================


class MountedGroup:
    """Endpoints of one APIGroup, registered manually.

    Usage:
        server.routes.mount_group(ItemsAPI) \\
            .register("list_items", list_items) \\
            .register(ItemsAPI["get_item"], get_item)
    """

    def __init__(self, routes: Routes, group: APIGroup) -> None:
        self.routes = routes
        self.group = group

    def register(
        self, endpoint: EndpointDescriptor | str, handler: EndpointHandler
    ) -> MountedGroup:
        """Register one endpoint of the group.

        Raises:
            ValueError: If the endpoint is not part of the group.
        """
        name = endpoint if isinstance(endpoint, str) else endpoint.name
        descriptor = self.group.endpoints.get(name)
        if descriptor is None or (
            isinstance(endpoint, EndpointDescriptor) and endpoint != descriptor
        ):
            raise ValueError(f"Endpoint '{name}' is not part of '{self.group.name}'")
        self.routes.register(descriptor, handler)
        return self


class APIRoutes:
    """Routes of a mounted service; further endpoints may still be registered."""

    def __init__(self, routes: Routes, service: APIServiceProtocol) -> None:
        self.routes = routes
        self.service = service

    def register(self, descriptor: EndpointDescriptor, handler: EndpointHandler) -> APIRoutes:
        self.routes.register(descriptor, handler)
        return self
