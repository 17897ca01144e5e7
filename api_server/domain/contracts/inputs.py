"""Typed endpoint inputs assembled from path, query and body data.

An endpoint's input is a pydantic model whose fields declare where their
value comes from with an ``Annotated`` marker:

    class GetChat(APIInput):
        book_id: Annotated[UUID, PathParam("bookId")]
        chat_id: Annotated[str, PathParam("chatId")]
        limit: Annotated[int | None, QueryParam()] = None
        body: Annotated[CreateChatBody, Body()]

Unmarked fields are query parameters named after the field (or its alias).
Values arrive as strings and are coerced by pydantic's lax mode, so
``"10"`` becomes ``10`` for an ``int`` field and ISO-8601 strings become
``datetime`` values. The body field receives the parsed JSON document, or
the raw bytes when it is annotated as ``bytes``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self

import pydantic_core
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.fields import FieldInfo

from api_server.core.errors import DecodeError


@dataclass(frozen=True, slots=True)
class PathParam:
    """Field value comes from a named path template segment."""

    name: str | None = None


@dataclass(frozen=True, slots=True)
class QueryParam:
    """Field value comes from the query string."""

    name: str | None = None


@dataclass(frozen=True, slots=True)
class Body:
    """Field value is the request body (JSON unless annotated as bytes)."""


type ParameterSource = PathParam | QueryParam | Body


def parameter_source(field: FieldInfo) -> ParameterSource:
    """Return the source marker of a field (QueryParam when unmarked)."""
    for item in field.metadata:
        if isinstance(item, (PathParam, QueryParam, Body)):
            return item
    return QueryParam()


def wire_name(field_name: str, field: FieldInfo) -> str:
    """Return the name a field is looked up by in path or query parameters."""
    source = parameter_source(field)
    if isinstance(source, (PathParam, QueryParam)) and source.name:
        return source.name
    return field.alias or field_name


class APIInput(BaseModel):
    """Base class for endpoint inputs."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @classmethod
    def path_parameter_names(cls) -> set[str]:
        """Wire names of all path-parameter fields."""
        return {
            wire_name(name, field)
            for name, field in cls.model_fields.items()
            if isinstance(parameter_source(field), PathParam)
        }

    @classmethod
    def decode(
        cls,
        path_parameters: Mapping[str, str],
        query_parameters: Mapping[str, str],
        body: bytes | None,
    ) -> Self:
        """Assemble a typed input from the three request sources.

        Args:
            path_parameters: Decoded path parameter values by name.
            query_parameters: Decoded query parameter values by name.
            body: Raw body bytes, or None when the request has no body.

        Returns:
            Self: Validated input instance.

        Raises:
            DecodeError: If a value is missing, has the wrong type, or the
                body is not valid JSON.
        """
        data: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            source = parameter_source(field)
            match source:
                case PathParam():
                    key = wire_name(name, field)
                    if key in path_parameters:
                        data[name] = path_parameters[key]
                case QueryParam():
                    key = wire_name(name, field)
                    if key in query_parameters:
                        data[name] = query_parameters[key]
                case Body():
                    if body:
                        data[name] = (
                            body if field.annotation is bytes else _parse_json(body)
                        )

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise DecodeError.from_validation_error(exc) from exc


class EmptyInput(APIInput):
    """Input of endpoints that take no parameters."""


class EmptyOutput:
    """Output marker of endpoints that answer 204 with no body."""


def _parse_json(body: bytes) -> Any:
    try:
        return pydantic_core.from_json(body)
    except ValueError as exc:
        raise DecodeError.invalid_json(str(exc)) from exc
