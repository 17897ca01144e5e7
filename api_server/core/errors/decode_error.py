"""Decode errors for malformed path, query or body data.

A DecodeError is raised when request data does not fit the endpoint's
declared input shape. The error middleware always maps it to 400 with a
description derived from the specific structural failure.

Kinds:
    KEY_NOT_FOUND: A required field is absent.
    TYPE_MISMATCH: A value could not be coerced to the declared type.
    VALUE_NOT_FOUND: A required value is null.
    DATA_CORRUPTED: The payload itself is unreadable (e.g. invalid JSON).
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from pydantic import ValidationError
from pydantic_core import ErrorDetails


class DecodeErrorKind(StrEnum):
    """Structural failure categories."""

    KEY_NOT_FOUND = "key_not_found"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_NOT_FOUND = "value_not_found"
    DATA_CORRUPTED = "data_corrupted"


class DecodeError(Exception):
    """Request data does not match the declared input shape.

    Attributes:
        kind: Structural failure category.
        path: Location of the failure (outermost first).
        key: Missing key name (KEY_NOT_FOUND only).
        type_name: Expected type name (TYPE_MISMATCH / VALUE_NOT_FOUND).
        detail: Free-form description (DATA_CORRUPTED only).
    """

    def __init__(
        self,
        kind: DecodeErrorKind,
        *,
        path: Sequence[str | int] = (),
        key: str | None = None,
        type_name: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.kind = kind
        self.path = tuple(path)
        self.key = key
        self.type_name = type_name
        self.detail = detail
        super().__init__(self.description)

    @property
    def description(self) -> str:
        """Human-readable message sent to the client."""
        location = ".".join(str(part) for part in self.path)
        match self.kind:
            case DecodeErrorKind.KEY_NOT_FOUND:
                return f"Missing key '{self.key}' at {location}"
            case DecodeErrorKind.TYPE_MISMATCH:
                return f"Type mismatch for {self.type_name} at {location}"
            case DecodeErrorKind.VALUE_NOT_FOUND:
                return f"Value not found for {self.type_name} at {location}"
            case DecodeErrorKind.DATA_CORRUPTED:
                return self.detail or "The given data was corrupted"

    @classmethod
    def invalid_json(cls, reason: str) -> DecodeError:
        """Build a DATA_CORRUPTED error for an unparsable JSON body."""
        return cls(
            DecodeErrorKind.DATA_CORRUPTED,
            path=("body",),
            detail=f"The given data was not valid JSON. {reason}".strip(),
        )

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> DecodeError:
        """Convert the first pydantic validation failure into a DecodeError.

        Args:
            exc: Validation error raised while building the input model.

        Returns:
            DecodeError: Error describing the first failing location.
        """
        return cls.from_error_details(exc.errors()[0])

    @classmethod
    def from_error_details(cls, details: ErrorDetails) -> DecodeError:
        """Convert one pydantic error entry into a DecodeError."""
        loc = tuple(details["loc"])
        error_type = details["type"]

        if error_type == "missing":
            return cls(
                DecodeErrorKind.KEY_NOT_FOUND,
                path=loc[:-1],
                key=str(loc[-1]) if loc else None,
            )

        type_name = _expected_type_name(error_type)
        if details.get("input") is None and error_type.endswith("_type"):
            return cls(DecodeErrorKind.VALUE_NOT_FOUND, path=loc, type_name=type_name)
        if error_type in {"json_invalid", "json_type"}:
            return cls(DecodeErrorKind.DATA_CORRUPTED, path=loc, detail=details["msg"])
        return cls(DecodeErrorKind.TYPE_MISMATCH, path=loc, type_name=type_name)


# Pydantic error types are "<type>_<reason>", e.g. "int_parsing", "uuid_type".
_TYPE_NAMES: dict[str, str] = {
    "int": "Int",
    "float": "Double",
    "decimal": "Decimal",
    "bool": "Bool",
    "string": "String",
    "str": "String",
    "uuid": "UUID",
    "datetime": "Date",
    "date": "Date",
    "time": "Time",
    "list": "Array",
    "tuple": "Array",
    "set": "Set",
    "dict": "Dictionary",
    "model": "Object",
    "enum": "Enum",
    "url": "URL",
}


def _expected_type_name(error_type: str) -> str:
    prefix = error_type.split("_", 1)[0]
    return _TYPE_NAMES.get(prefix, prefix)
