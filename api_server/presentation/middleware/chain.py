"""Middleware protocol and chain composition.

A middleware is any object with an async ``handle(request, next)`` method.
``next`` runs the rest of the chain and ends in the terminal dispatch
step (route resolution + handler). A middleware may:

- transform the request before calling ``next``
- transform the response ``next`` returns
- return a response without calling ``next`` (short-circuit)
- let an exception propagate

Middlewares run in registration order on the way in and in reverse order on
the way out; the first registered is the outermost.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import ServerResponse

# The next handler in the middleware chain
type Next = Callable[[ServerRequest], Awaitable[ServerResponse]]


class ServerMiddleware(Protocol):
    """Protocol for request/response interceptors."""

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse: ...


class FunctionMiddleware:
    """Adapts a plain ``async def mw(request, next)`` function to ServerMiddleware.

    Usage:
        async def timing(request: ServerRequest, next: Next) -> ServerResponse:
            response = await next(request)
            return response.with_added_headers({"X-Served-By": "api"})

        server.use(FunctionMiddleware(timing))
    """

    def __init__(
        self, function: Callable[[ServerRequest, Next], Awaitable[ServerResponse]]
    ) -> None:
        self._function = function

    async def handle(self, request: ServerRequest, next: Next) -> ServerResponse:
        return await self._function(request, next)


def build_chain(middlewares: Sequence[ServerMiddleware], terminal: Next) -> Next:
    """Compose ``middlewares`` around ``terminal``.

    Args:
        middlewares: Middlewares, outermost first.
        terminal: Innermost step (route dispatch).

    Returns:
        Next: Callable running the whole chain once per call.
    """
    chain = terminal
    for middleware in reversed(middlewares):
        chain = _link(middleware, chain)
    return chain


def _link(middleware: ServerMiddleware, next_step: Next) -> Next:
    async def step(request: ServerRequest) -> ServerResponse:
        return await middleware.handle(request, next_step)

    return step
