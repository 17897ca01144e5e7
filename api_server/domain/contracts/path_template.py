"""Path templates with named parameter segments.

A path template is an ordered sequence of segments, each either a literal
(``items``) or a named parameter (``:itemId``). Templates compose by
concatenation, which is how a group's base path and an endpoint's sub path
become the full mount path:

    PathTemplate.parse("/v1/books/:bookId").join(PathTemplate.parse("chats/:chatId"))
    # -> /v1/books/:bookId/chats/:chatId

Matching works on the raw (still percent-encoded) request path segments and
percent-decodes captured values, so ``/files/a%2Fb`` matched against
``/files/:name`` yields ``name == "a/b"`` instead of being split in two.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import unquote

from api_server.core.constants import PATH_PARAMETER_PREFIX


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One template segment.

    Attributes:
        value: Literal text, or the parameter name without the ``:`` marker.
        is_parameter: True for a named parameter segment.
    """

    value: str
    is_parameter: bool = False

    def __str__(self) -> str:
        return f"{PATH_PARAMETER_PREFIX}{self.value}" if self.is_parameter else self.value


@dataclass(frozen=True, slots=True)
class PathTemplate:
    """Immutable path template.

    Raises:
        ValueError: On construction, if a parameter name appears twice or a
            parameter segment has no name.
    """

    segments: tuple[PathSegment, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for segment in self.segments:
            if not segment.is_parameter:
                continue
            if not segment.value:
                raise ValueError(f"Empty path parameter name in '{self}'")
            if segment.value in seen:
                raise ValueError(
                    f"Duplicate path parameter ':{segment.value}' in '{self}'"
                )
            seen.add(segment.value)

    @classmethod
    def parse(cls, *paths: str) -> PathTemplate:
        """Parse one or more path strings into a single template.

        Empty segments (leading, trailing or doubled slashes) are dropped.

        Args:
            *paths: Path strings such as ``"/v1/books/:bookId"``.

        Returns:
            PathTemplate: Concatenated template.
        """
        segments: list[PathSegment] = []
        for path in paths:
            for part in path.split("/"):
                if not part:
                    continue
                if part.startswith(PATH_PARAMETER_PREFIX):
                    segments.append(
                        PathSegment(part[len(PATH_PARAMETER_PREFIX) :], is_parameter=True)
                    )
                else:
                    segments.append(PathSegment(part))
        return cls(tuple(segments))

    def join(self, other: PathTemplate | str) -> PathTemplate:
        """Return this template followed by ``other``."""
        if isinstance(other, str):
            other = PathTemplate.parse(other)
        return PathTemplate(self.segments + other.segments)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(s.value for s in self.segments if s.is_parameter)

    def match(self, raw_segments: Sequence[str]) -> dict[str, str] | None:
        """Match raw request path segments against this template.

        Args:
            raw_segments: Percent-encoded request path segments (no empties).

        Returns:
            dict[str, str] | None: Decoded parameter values, or None if the
                path does not match.
        """
        if len(raw_segments) != len(self.segments):
            return None

        parameters: dict[str, str] = {}
        for segment, raw in zip(self.segments, raw_segments):
            value = unquote(raw)
            if segment.is_parameter:
                parameters[segment.value] = value
            elif segment.value != value:
                return None
        return parameters

    def __str__(self) -> str:
        return "/" + "/".join(str(segment) for segment in self.segments)


def split_raw_path(raw_path: str) -> list[str]:
    """Split a raw request path into its non-empty segments (no decoding)."""
    return [part for part in raw_path.split("/") if part]
