"""Unit tests for the error model.

Tests cover:
- ErrorResponse wire format (errorCode alias, deterministic bytes)
- APIContractError attributes, overrides, equality
- HTTPError factories (status and code per factory)
- DecodeError descriptions and conversion from pydantic errors
"""

import pytest
from pydantic import BaseModel, ValidationError

from api_server.core.enums import ErrorCode
from api_server.core.errors import (
    APIContractError,
    DecodeError,
    DecodeErrorKind,
    ErrorResponse,
    HTTPError,
)


# =============================================================================
# ErrorResponse
# =============================================================================


@pytest.mark.unit
class TestErrorResponse:
    """Test the JSON error envelope."""

    def test_serializes_with_camel_case_key(self):
        error = ErrorResponse(error_code="NOT_FOUND", message="Missing")

        assert error.to_json_bytes() == b'{"errorCode":"NOT_FOUND","message":"Missing"}'

    def test_equal_inputs_give_identical_bytes(self):
        first = ErrorResponse(error_code="X", message="y")
        second = ErrorResponse(error_code="X", message="y")

        assert first.to_json_bytes() == second.to_json_bytes()

    def test_accepts_alias_on_input(self):
        error = ErrorResponse.model_validate({"errorCode": "A", "message": "b"})

        assert error.error_code == "A"


# =============================================================================
# APIContractError
# =============================================================================


class ItemNotFoundError(APIContractError):
    status_code = 404
    error_code = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item not found: {item_id}")


@pytest.mark.unit
class TestAPIContractError:
    """Test the base contract error."""

    def test_defaults_are_internal_error(self):
        error = APIContractError()

        assert error.status_code == 500
        assert error.error_code == "INTERNAL_ERROR"
        assert error.message == "Internal server error"

    def test_subclass_attributes(self):
        error = ItemNotFoundError("42")

        assert error.status_code == 404
        assert error.to_error_response() == ErrorResponse(
            error_code="ITEM_NOT_FOUND", message="Item not found: 42"
        )
        assert str(error) == "Item not found: 42"

    def test_explicit_overrides_accept_enum_codes(self):
        error = APIContractError(
            "Slow down", status_code=429, error_code=ErrorCode.TOO_MANY_REQUESTS
        )

        assert error.error_code == "TOO_MANY_REQUESTS"
        assert error.status_code == 429

    def test_equality_by_value(self):
        assert ItemNotFoundError("1") == ItemNotFoundError("1")
        assert ItemNotFoundError("1") != ItemNotFoundError("2")
        assert hash(ItemNotFoundError("1")) == hash(ItemNotFoundError("1"))


@pytest.mark.unit
class TestHTTPErrorFactories:
    """Test each factory's status and code."""

    @pytest.mark.parametrize(
        ("factory", "status_code", "error_code"),
        [
            (HTTPError.bad_request, 400, "BAD_REQUEST"),
            (HTTPError.unauthorized, 401, "UNAUTHORIZED"),
            (HTTPError.forbidden, 403, "FORBIDDEN"),
            (HTTPError.not_found, 404, "NOT_FOUND"),
            (HTTPError.method_not_allowed, 405, "METHOD_NOT_ALLOWED"),
            (HTTPError.conflict, 409, "CONFLICT"),
            (HTTPError.too_many_requests, 429, "TOO_MANY_REQUESTS"),
            (HTTPError.internal_error, 500, "INTERNAL_ERROR"),
        ],
    )
    def test_factory(self, factory, status_code, error_code):
        error = factory()

        assert error.status_code == status_code
        assert error.error_code == error_code

    def test_unauthorized_message(self):
        assert HTTPError.unauthorized().message == "Authentication required"


# =============================================================================
# DecodeError
# =============================================================================


class Inner(BaseModel):
    count: int


class Outer(BaseModel):
    name: str
    inner: Inner


def first_error(data) -> DecodeError:
    with pytest.raises(ValidationError) as exc_info:
        Outer.model_validate(data)
    return DecodeError.from_validation_error(exc_info.value)


@pytest.mark.unit
class TestDecodeError:
    """Test structural failure descriptions."""

    def test_missing_key(self):
        error = first_error({"inner": {"count": 1}})

        assert error.kind is DecodeErrorKind.KEY_NOT_FOUND
        assert error.description == "Missing key 'name' at "

    def test_nested_missing_key_location(self):
        error = first_error({"name": "n", "inner": {}})

        assert error.description == "Missing key 'count' at inner"

    def test_type_mismatch(self):
        error = first_error({"name": "n", "inner": {"count": "many"}})

        assert error.kind is DecodeErrorKind.TYPE_MISMATCH
        assert error.description == "Type mismatch for Int at inner.count"

    def test_null_value(self):
        error = first_error({"name": None, "inner": {"count": 1}})

        assert error.kind is DecodeErrorKind.VALUE_NOT_FOUND
        assert error.description == "Value not found for String at name"

    def test_invalid_json(self):
        error = DecodeError.invalid_json("expected value at line 1 column 1")

        assert error.kind is DecodeErrorKind.DATA_CORRUPTED
        assert error.description.startswith("The given data was not valid JSON.")
        assert error.path == ("body",)

    def test_message_is_description(self):
        error = DecodeError(DecodeErrorKind.KEY_NOT_FOUND, path=("a", "b"), key="k")

        assert str(error) == "Missing key 'k' at a.b"
