"""Endpoint contract types.

An endpoint contract is static metadata for one API operation. Contracts
are declared once at import time, grouped under a shared base path and
auth requirement, and read by the route registrar when a service is mounted.

Core types:
    HTTPMethod: HTTP method enum
    AuthRequirement: Per-endpoint auth requirement (none, required)
    EndpointDescriptor: Method, sub path, input/output types, auth
    APIGroup: Named set of endpoints sharing a base path and auth requirement

Usage:
    from api_server.domain.contracts import APIGroup, EndpointDescriptor, HTTPMethod

    ItemsAPI = APIGroup.define(
        name="items",
        base_path="/items",
        endpoints=[
            EndpointDescriptor(
                name="get_item",
                method=HTTPMethod.GET,
                path=":itemId",
                input_type=GetItemInput,
                output_type=Item,
            ),
        ],
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from api_server.domain.contracts.inputs import APIInput, EmptyInput, EmptyOutput
from api_server.domain.contracts.path_template import PathTemplate


# =============================================================================
# HTTP Method Enum
# =============================================================================


class HTTPMethod(str, Enum):
    """HTTP methods for API routes."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


# =============================================================================
# Authentication Requirement
# =============================================================================


class AuthRequirement(str, Enum):
    """Authentication requirement of an endpoint.

    Attributes:
        NONE: Anonymous access allowed; an identity is attached when present.
        REQUIRED: Requests without an identity fail with 401 before the
            handler runs.
    """

    NONE = "none"
    REQUIRED = "required"


# =============================================================================
# Endpoint Descriptor
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class EndpointDescriptor:
    """Static metadata for one API operation.

    Attributes:
        name: Endpoint identity within its group (used by mount()).
        method: HTTP method.
        path: Sub path relative to the group's base path.
        input_type: APIInput subclass assembled from the request.
        output_type: Response type; EmptyOutput means 204 with no body.
        auth: Auth requirement; None inherits the group's requirement.
        base_path: Group base path (bound by APIGroup.define).
        summary: Optional human-readable description.
    """

    name: str
    method: HTTPMethod
    path: str = ""
    input_type: type[APIInput] = EmptyInput
    output_type: type | None = None
    auth: AuthRequirement | None = None
    base_path: str = ""
    summary: str | None = None
    path_template: PathTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "path_template", PathTemplate.parse(self.base_path, self.path)
        )

    def check_path_parameters(self) -> None:
        """Verify every path-parameter field appears in the full template.

        Called at registration time, once the base path is bound.

        Raises:
            ValueError: If the input declares a parameter the template lacks.
        """
        missing = self.input_type.path_parameter_names() - set(
            self.path_template.parameter_names
        )
        if missing:
            raise ValueError(
                f"Endpoint '{self.name}' declares path parameters {sorted(missing)} "
                f"not present in '{self.path_template}'"
            )

    @property
    def auth_requirement(self) -> AuthRequirement:
        return self.auth or AuthRequirement.NONE

    @property
    def returns_empty(self) -> bool:
        """True when a successful call answers 204 with no body."""
        return self.output_type is EmptyOutput

    def bound_to(
        self, base_path: str, auth: AuthRequirement | None
    ) -> EndpointDescriptor:
        """Return a copy bound to a group's base path and default auth."""
        return replace(self, base_path=base_path, auth=self.auth or auth)


# =============================================================================
# API Group
# =============================================================================


@dataclass(frozen=True)
class APIGroup:
    """Named set of endpoints sharing a base path and auth requirement.

    Attributes:
        name: Group name.
        base_path: Path prefix of every endpoint (may contain parameters).
        auth: Default auth requirement of the group's endpoints.
        endpoints: Bound endpoint descriptors by name.
    """

    name: str
    base_path: str
    auth: AuthRequirement
    endpoints: dict[str, EndpointDescriptor]

    @classmethod
    def define(
        cls,
        *,
        name: str,
        base_path: str,
        endpoints: Iterable[EndpointDescriptor],
        auth: AuthRequirement = AuthRequirement.NONE,
    ) -> APIGroup:
        """Declare a group, binding base path and auth into every endpoint.

        Raises:
            ValueError: If two endpoints share a name.
        """
        bound: dict[str, EndpointDescriptor] = {}
        for endpoint in endpoints:
            if endpoint.name in bound:
                raise ValueError(f"Duplicate endpoint '{endpoint.name}' in '{name}'")
            bound[endpoint.name] = endpoint.bound_to(base_path, auth)
        return cls(name=name, base_path=base_path, auth=auth, endpoints=bound)

    def __getitem__(self, endpoint_name: str) -> EndpointDescriptor:
        return self.endpoints[endpoint_name]

    def __iter__(self) -> Iterator[EndpointDescriptor]:
        return iter(self.endpoints.values())

    def __len__(self) -> int:
        return len(self.endpoints)
