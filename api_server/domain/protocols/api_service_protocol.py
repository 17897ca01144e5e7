"""APIServiceProtocol - a concrete implementation of one APIGroup.

``Routes.mount(service)`` registers every endpoint of ``service.group``
with the handler ``service.handlers()`` returns for it. The mapping is built
explicitly by the service, once, at registration time:

    class ItemsService:
        group = ItemsAPI

        def handlers(self) -> Mapping[str, EndpointHandler]:
            return {
                "list_items": self.list_items,
                "get_item": self.get_item,
            }

        async def list_items(self, input: ListItems, context: ServiceContext) -> list[Item]:
            ...

Handlers are coroutine functions taking the decoded input and the
ServiceContext. They return the encodable output, or None for endpoints
whose output type is EmptyOutput.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from api_server.domain.contracts import APIGroup, APIInput
from api_server.domain.service_context import ServiceContext

type EndpointHandler = Callable[[APIInput, ServiceContext], Awaitable[Any]]


class APIServiceProtocol(Protocol):
    """Service implementing every endpoint of an APIGroup."""

    group: APIGroup

    def handlers(self) -> Mapping[str, EndpointHandler]:
        """Return the handler for each endpoint name of ``group``."""
        ...
