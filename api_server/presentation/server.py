"""ASGI server application.

ServerApplication is the object uvicorn serves. For every HTTP request it:

    1. wraps the ASGI scope in a ServerRequest
    2. runs the middleware chain (in registration order, with an error
       middleware outermost unless one was registered first)
    3. at the end of the chain, resolves the route (404 / 405 raised as
       HTTPError), reads the body up to the configured maximum (413 abort),
       and invokes the dispatch unit
    4. sends the resulting Starlette response

Routes and middlewares are configured before the server starts. The route
table is frozen at lifespan startup, or on the first request when the ASGI
server does not send lifespan events (e.g. some test clients).

Usage:
    server = ServerApplication(settings=settings, logger=logger)
    server.use_cors()
    server.routes.get("health", health)
    server.run()
"""

from __future__ import annotations

from typing import Self

import uvicorn
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from api_server.core.config import Settings, get_settings, parse_byte_size
from api_server.domain.protocols.authentication_provider_protocol import (
    AuthenticationProviderProtocol,
)
from api_server.domain.protocols.logger_protocol import LoggerProtocol
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import ServerResponse
from api_server.presentation.middleware.auth_middleware import AuthMiddleware
from api_server.presentation.middleware.chain import Next, ServerMiddleware, build_chain
from api_server.presentation.middleware.cors_middleware import (
    CORSConfiguration,
    CORSMiddleware,
)
from api_server.presentation.middleware.error_middleware import ErrorMiddleware
from api_server.presentation.routing.registrar import Routes
from api_server.presentation.routing.route_table import RouteTable


class ServerApplication:
    """Contract-driven HTTP server.

    Args:
        settings: Application settings (defaults to the cached settings).
        logger: Logger (defaults to the container's logger).
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        if logger is None:
            from api_server.core.container import get_logger

            logger = get_logger()

        self.settings = settings or get_settings()
        self.logger = logger
        self._table = RouteTable()
        self._routes = Routes(
            self._table,
            logger,
            sse_keepalive_interval=self.settings.sse_keepalive_seconds,
        )
        self._middlewares: list[ServerMiddleware] = []
        self._expose_details = False
        self._max_body_size = self.settings.max_body_size
        self._chain: Next | None = None

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def routes(self) -> Routes:
        """Root route registrar."""
        return self._routes

    @property
    def max_body_size(self) -> int:
        return self._max_body_size

    def use(self, middleware: ServerMiddleware) -> Self:
        """Append a middleware (the first appended runs outermost)."""
        self._ensure_configurable()
        self._middlewares.append(middleware)
        return self

    def use_auth(self, provider: AuthenticationProviderProtocol) -> Self:
        """Attach identities from ``Authorization: Bearer`` tokens."""
        return self.use(AuthMiddleware(provider, self.logger))

    def use_error_middleware(self, *, expose_details: bool = False) -> Self:
        """Append the error middleware at this position in the chain.

        Middlewares registered before it (e.g. CORS) see translated error
        responses. An outermost error middleware is still added when the
        first registered middleware is not one.
        """
        self._ensure_configurable()
        self._expose_details = expose_details
        return self.use(ErrorMiddleware(self.logger, expose_details=expose_details))

    def use_cors(self, configuration: CORSConfiguration | None = None) -> Self:
        return self.use(CORSMiddleware(configuration))

    def set_max_body_size(self, size: int | str) -> Self:
        """Set the largest accepted request body (bytes, or e.g. ``"10mb"``)."""
        self._ensure_configurable()
        self._max_body_size = parse_byte_size(size)
        return self

    def _ensure_configurable(self) -> None:
        if self._chain is not None:
            raise RuntimeError("Server configuration cannot change once serving")

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _handler(self) -> Next:
        if self._chain is None:
            self._table.freeze()
            middlewares = list(self._middlewares)
            if not middlewares or not isinstance(middlewares[0], ErrorMiddleware):
                middlewares.insert(
                    0, ErrorMiddleware(self.logger, expose_details=self._expose_details)
                )
            self._chain = build_chain(middlewares, self._dispatch)
        return self._chain

    async def _dispatch(self, request: ServerRequest) -> ServerResponse:
        route_match = self._table.resolve(request.method, request.raw_path)
        request = request.with_path_parameters(route_match.path_parameters)
        request = request.with_body(await request.read_body(self._max_body_size))
        return await route_match.route.endpoint(request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        match scope["type"]:
            case "lifespan":
                await self._lifespan(receive, send)
            case "http":
                handler = self._handler()
                response = await handler(ServerRequest(Request(scope, receive)))
                await response.to_starlette()(scope, receive, send)
            case "websocket":
                await send({"type": "websocket.close", "code": 1000})

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._handler()
                self.logger.info(
                    "Server started",
                    app_name=self.settings.app_name,
                    version=self.settings.app_version,
                    environment=self.settings.environment.value,
                    routes=len(self._table),
                )
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                self.logger.info("Server stopped", app_name=self.settings.app_name)
                await send({"type": "lifespan.shutdown.complete"})
                return

    def run(self) -> None:
        """Serve on the configured host and port until interrupted."""
        uvicorn.run(
            self,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )
