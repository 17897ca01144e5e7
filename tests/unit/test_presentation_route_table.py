"""Unit tests for RouteTable.

Tests cover:
- Resolution with decoded path parameters
- 404 (no path match) vs 405 (path matches, method does not)
- Literal segments winning over parameters
- HEAD falling back to GET
- Conflicting registrations and frozen table
"""

import pytest

from api_server.core.errors import HTTPError
from api_server.domain.contracts import HTTPMethod, PathTemplate
from api_server.presentation.http import DataResponse
from api_server.presentation.routing import RouteTable


async def endpoint(request):
    return DataResponse.create(200)


def table_with(*routes: tuple[str, str]) -> RouteTable:
    table = RouteTable()
    for method, path in routes:
        table.add(method, PathTemplate.parse(path), endpoint, name=f"{method} {path}")
    return table


@pytest.mark.unit
class TestRouteResolution:
    """Test resolve()."""

    def test_captures_parameters(self):
        table = table_with(("GET", "/books/:bookId/chats/:chatId"))

        match = table.resolve("GET", "/books/b%201/chats/7")

        assert match.path_parameters == {"bookId": "b 1", "chatId": "7"}
        assert match.route.name == "GET /books/:bookId/chats/:chatId"

    def test_not_found(self):
        table = table_with(("GET", "/items"))

        with pytest.raises(HTTPError) as exc_info:
            table.resolve("GET", "/users")

        assert exc_info.value.status_code == 404

    def test_method_not_allowed(self):
        table = table_with(("GET", "/items"))

        with pytest.raises(HTTPError) as exc_info:
            table.resolve("DELETE", "/items")

        assert exc_info.value.status_code == 405
        assert exc_info.value.error_code == "METHOD_NOT_ALLOWED"

    def test_literal_beats_parameter(self):
        table = table_with(("GET", "/items/:itemId"), ("GET", "/items/count"))

        assert table.resolve("GET", "/items/count").route.name == "GET /items/count"
        assert table.resolve("GET", "/items/9").path_parameters == {"itemId": "9"}

    def test_earlier_literal_wins(self):
        table = table_with(("GET", "/:kind/latest"), ("GET", "/items/:itemId"))

        assert table.resolve("GET", "/items/latest").route.name == "GET /items/:itemId"

    def test_head_falls_back_to_get(self):
        table = table_with(("GET", "/items"))

        assert table.resolve("HEAD", "/items").route.method == "GET"

    def test_trailing_slash_ignored(self):
        assert table_with(("GET", "/items")).resolve("GET", "/items/").route


@pytest.mark.unit
class TestRouteRegistration:
    """Test add() and freeze()."""

    def test_method_is_normalized(self):
        route = RouteTable().add("post", PathTemplate.parse("/x"), endpoint)

        assert route.method == "POST"

    def test_enum_method(self):
        route = RouteTable().add(HTTPMethod.PATCH, PathTemplate.parse("/x"), endpoint)

        assert route.method == "PATCH"

    def test_same_shape_conflicts(self):
        table = table_with(("GET", "/items/:itemId"))

        with pytest.raises(ValueError, match="conflicts"):
            table.add("GET", PathTemplate.parse("/items/:id"), endpoint)

    def test_same_path_different_method_allowed(self):
        table = table_with(("GET", "/items"), ("POST", "/items"))

        assert len(table) == 2

    def test_frozen_table_rejects_routes(self):
        table = table_with(("GET", "/items"))
        table.freeze()

        assert table.frozen
        with pytest.raises(RuntimeError):
            table.add("POST", PathTemplate.parse("/items"), endpoint)

    def test_iteration_in_registration_order(self):
        table = table_with(("GET", "/a"), ("GET", "/b"))

        assert [str(route.template) for route in table] == ["/a", "/b"]
