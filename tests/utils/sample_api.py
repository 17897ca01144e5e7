"""Sample contracts and services used across unit and API tests.

Groups:
- ItemsAPI ("/test", anonymous): list, get, create, delete items
- ProtectedAPI ("/protected", auth required): secret, delete resource
- BookChatsAPI ("/v1/books/:bookId"): nested path parameters
- StreamsAPI ("/streams"): contract-bound SSE stream

Also provides an in-memory authentication provider accepting fixed tokens.
"""

from collections.abc import AsyncIterator, Mapping
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from starlette import status

from api_server.core.errors import APIContractError
from api_server.domain.contracts import (
    APIGroup,
    APIInput,
    AuthRequirement,
    Body,
    EmptyOutput,
    EndpointDescriptor,
    HTTPMethod,
    PathParam,
    QueryParam,
)
from api_server.domain.events import SSEEvent
from api_server.domain.protocols.api_service_protocol import EndpointHandler
from api_server.domain.protocols.authentication_provider_protocol import (
    AuthenticationFailedError,
)
from api_server.domain.service_context import ServiceContext

VALID_TOKEN = "valid-token"
VALID_USER_ID = "user-123"
FIXED_CREATED_AT = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


# =============================================================================
# Models
# =============================================================================


class Item(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    created_at: datetime = Field(default=FIXED_CREATED_AT, alias="createdAt")


class ItemList(BaseModel):
    items: list[Item]
    limit: int | None = None
    offset: int | None = None


class CreateItemBody(BaseModel):
    name: str


class Secret(BaseModel):
    secret: str


class Chat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book_id: str = Field(alias="bookId")
    chat_id: str = Field(alias="chatId")


# =============================================================================
# Inputs
# =============================================================================


class ListItems(APIInput):
    limit: Annotated[int | None, QueryParam()] = None
    offset: Annotated[int | None, QueryParam()] = None


class GetItem(APIInput):
    item_id: Annotated[str, PathParam("itemId")]


class CreateItem(APIInput):
    body: Annotated[CreateItemBody, Body()]


class DeleteItem(APIInput):
    item_id: Annotated[str, PathParam("itemId")]


class GetSecret(APIInput):
    limit: Annotated[int | None, QueryParam()] = None


class DeleteResource(APIInput):
    resource_id: Annotated[str, PathParam("resourceId")]


class GetChat(APIInput):
    book_id: Annotated[str, PathParam("bookId")]
    chat_id: Annotated[str, PathParam("chatId")]


class WatchTopic(APIInput):
    topic: Annotated[str, PathParam("topic")]
    count: Annotated[int, QueryParam()] = 3


# =============================================================================
# Contracts
# =============================================================================


ItemsAPI = APIGroup.define(
    name="test",
    base_path="/test",
    endpoints=[
        EndpointDescriptor(
            name="list_items",
            method=HTTPMethod.GET,
            path="items",
            input_type=ListItems,
            output_type=ItemList,
        ),
        EndpointDescriptor(
            name="get_item",
            method=HTTPMethod.GET,
            path="items/:itemId",
            input_type=GetItem,
            output_type=Item,
        ),
        EndpointDescriptor(
            name="create_item",
            method=HTTPMethod.POST,
            path="items",
            input_type=CreateItem,
            output_type=Item,
        ),
        EndpointDescriptor(
            name="delete_item",
            method=HTTPMethod.DELETE,
            path="items/:itemId",
            input_type=DeleteItem,
            output_type=EmptyOutput,
        ),
    ],
)

ProtectedAPI = APIGroup.define(
    name="protected",
    base_path="/protected",
    auth=AuthRequirement.REQUIRED,
    endpoints=[
        EndpointDescriptor(
            name="get_secret",
            method=HTTPMethod.GET,
            path="secret",
            input_type=GetSecret,
            output_type=Secret,
        ),
        EndpointDescriptor(
            name="delete_resource",
            method=HTTPMethod.DELETE,
            path="resources/:resourceId",
            input_type=DeleteResource,
            output_type=EmptyOutput,
        ),
    ],
)

BookChatsAPI = APIGroup.define(
    name="book_chats",
    base_path="/v1/books/:bookId",
    endpoints=[
        EndpointDescriptor(
            name="get_chat",
            method=HTTPMethod.GET,
            path="chats/:chatId",
            input_type=GetChat,
            output_type=Chat,
        ),
    ],
)

StreamsAPI = APIGroup.define(
    name="streams",
    base_path="/streams",
    endpoints=[
        EndpointDescriptor(
            name="watch_topic",
            method=HTTPMethod.GET,
            path=":topic",
            input_type=WatchTopic,
        ),
        EndpointDescriptor(
            name="watch_private",
            method=HTTPMethod.GET,
            path="private/:topic",
            input_type=WatchTopic,
            auth=AuthRequirement.REQUIRED,
        ),
    ],
)


# =============================================================================
# Errors
# =============================================================================


class SampleAPIError(APIContractError):
    """Domain errors raised by the sample services."""

    @classmethod
    def item_not_found(cls, item_id: str) -> "SampleAPIError":
        return cls(
            f"Item not found: {item_id}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="ITEM_NOT_FOUND",
        )

    @classmethod
    def invalid_name(cls) -> "SampleAPIError":
        return cls(
            "Name must not be blank",
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_NAME",
        )


# =============================================================================
# Services
# =============================================================================


class ItemsService:
    """In-memory implementation of ItemsAPI."""

    group = ItemsAPI

    def __init__(self) -> None:
        self.items: dict[str, Item] = {
            "1": Item(id="1", name="First"),
            "2": Item(id="2", name="Second"),
        }
        self.deleted: list[str] = []
        self.contexts: list[ServiceContext] = []

    def handlers(self) -> Mapping[str, EndpointHandler]:
        return {
            "list_items": self.list_items,
            "get_item": self.get_item,
            "create_item": self.create_item,
            "delete_item": self.delete_item,
        }

    async def list_items(self, input: ListItems, context: ServiceContext) -> ItemList:
        self.contexts.append(context)
        items = list(self.items.values())
        start = input.offset or 0
        end = start + input.limit if input.limit is not None else None
        return ItemList(items=items[start:end], limit=input.limit, offset=input.offset)

    async def get_item(self, input: GetItem, context: ServiceContext) -> Item:
        self.contexts.append(context)
        if input.item_id == "crash":
            raise RuntimeError("database connection lost")
        item = self.items.get(input.item_id)
        if item is None:
            raise SampleAPIError.item_not_found(input.item_id)
        return item

    async def create_item(self, input: CreateItem, context: ServiceContext) -> Item:
        self.contexts.append(context)
        if not input.body.name.strip():
            raise SampleAPIError.invalid_name()
        item = Item(id=str(len(self.items) + 1), name=input.body.name)
        self.items[item.id] = item
        return item

    async def delete_item(self, input: DeleteItem, context: ServiceContext) -> None:
        self.contexts.append(context)
        self.deleted.append(input.item_id)


class ProtectedService:
    """Implementation of ProtectedAPI recording the caller."""

    group = ProtectedAPI

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def handlers(self) -> Mapping[str, EndpointHandler]:
        return {
            "get_secret": self.get_secret,
            "delete_resource": self.delete_resource,
        }

    async def get_secret(self, input: GetSecret, context: ServiceContext) -> Secret:
        self.calls.append(("get_secret", context.require_user_id()))
        return Secret(secret="top-secret-value")

    async def delete_resource(self, input: DeleteResource, context: ServiceContext) -> None:
        self.calls.append(("delete_resource", input.resource_id))


class BookChatsService:
    group = BookChatsAPI

    def handlers(self) -> Mapping[str, EndpointHandler]:
        return {"get_chat": self.get_chat}

    async def get_chat(self, input: GetChat, context: ServiceContext) -> Chat:
        return Chat(book_id=input.book_id, chat_id=input.chat_id)


async def topic_events(input: WatchTopic, context: ServiceContext) -> AsyncIterator[SSEEvent]:
    """Stream ``count`` JSON events for a topic."""
    for index in range(input.count):
        yield SSEEvent.json(
            {"topic": input.topic, "index": index, "user": context.authenticated_user_id},
            event="update",
            id=str(index),
        )


# =============================================================================
# Authentication
# =============================================================================


class FakeAuthenticationProvider:
    """Accepts VALID_TOKEN only."""

    def __init__(self) -> None:
        self.verified: list[str] = []

    async def verify_token(self, token: str) -> str:
        self.verified.append(token)
        if token != VALID_TOKEN:
            raise AuthenticationFailedError("Invalid token")
        return VALID_USER_ID


def auth_headers(token: str = VALID_TOKEN) -> dict[str, Any]:
    return {"Authorization": f"Bearer {token}"}
