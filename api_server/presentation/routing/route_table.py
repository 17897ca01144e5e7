"""Method + path template lookup.

Routes are added during startup only. ``freeze()`` is called when the server
starts serving; after that the table is read-only, so lookups need no
locking.

Resolution distinguishes two misses:
    - no template matches the path          -> 404 NOT_FOUND
    - templates match, none for the method  -> 405 METHOD_NOT_ALLOWED

When several templates match, the one with literal segments earliest wins,
so ``/items/count`` beats ``/items/:itemId``. HEAD falls back to GET.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field

from api_server.core.errors import HTTPError
from api_server.domain.contracts import HTTPMethod, PathTemplate
from api_server.domain.contracts.path_template import split_raw_path
from api_server.presentation.http.request import ServerRequest
from api_server.presentation.http.response import ServerResponse

# Dispatch unit: receives the request with path parameters and body attached
type Endpoint = Callable[[ServerRequest], Awaitable[ServerResponse]]


@dataclass(frozen=True, slots=True)
class Route:
    """One registered dispatch unit."""

    method: str
    template: PathTemplate
    endpoint: Endpoint = field(compare=False)
    name: str | None = None

    @property
    def specificity(self) -> tuple[bool, ...]:
        return tuple(not segment.is_parameter for segment in self.template.segments)

    @property
    def shape(self) -> tuple[str | None, ...]:
        """Template with parameter names erased (two routes with one shape clash)."""
        return tuple(
            None if segment.is_parameter else segment.value
            for segment in self.template.segments
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    path_parameters: dict[str, str]


class RouteTable:
    """Registry of dispatch units."""

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(
        self,
        method: HTTPMethod | str,
        template: PathTemplate,
        endpoint: Endpoint,
        *,
        name: str | None = None,
    ) -> Route:
        """Register a dispatch unit.

        Raises:
            RuntimeError: If the table is frozen.
            ValueError: If a route with the same method and shape exists.
        """
        if self._frozen:
            raise RuntimeError("Routes cannot be registered once the server is serving")

        route = Route(
            method=method.value if isinstance(method, HTTPMethod) else method.upper(),
            template=template,
            endpoint=endpoint,
            name=name,
        )
        for existing in self._routes:
            if existing.method == route.method and existing.shape == route.shape:
                raise ValueError(
                    f"Route {route.method} {route.template} conflicts with "
                    f"{existing.method} {existing.template}"
                )
        self._routes.append(route)
        return route

    def freeze(self) -> None:
        self._frozen = True

    def resolve(self, method: str, raw_path: str) -> RouteMatch:
        """Find the dispatch unit for a request.

        Args:
            method: Request method.
            raw_path: Percent-encoded request path.

        Returns:
            RouteMatch: Route and decoded path parameters.

        Raises:
            HTTPError: 404 if no route matches the path, 405 if routes match
                the path but not the method.
        """
        segments = split_raw_path(raw_path)
        candidates: dict[str, list[RouteMatch]] = {}
        for route in self._routes:
            parameters = route.template.match(segments)
            if parameters is not None:
                candidates.setdefault(route.method, []).append(
                    RouteMatch(route=route, path_parameters=parameters)
                )

        if not candidates:
            raise HTTPError.not_found(f"No route for {method} {raw_path}")

        matches = candidates.get(method)
        if matches is None and method == HTTPMethod.HEAD.value:
            matches = candidates.get(HTTPMethod.GET.value)
        if matches is None:
            raise HTTPError.method_not_allowed(f"{method} not allowed for {raw_path}")

        return max(matches, key=lambda match: match.route.specificity)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
