"""Endpoint contract layer.

Usage:
    from api_server.domain.contracts import (
        APIGroup, APIInput, AuthRequirement, Body, EmptyOutput,
        EndpointDescriptor, HTTPMethod, PathParam, QueryParam,
    )
"""

from api_server.domain.contracts.inputs import (
    APIInput,
    Body,
    EmptyInput,
    EmptyOutput,
    PathParam,
    QueryParam,
)
from api_server.domain.contracts.metadata import (
    APIGroup,
    AuthRequirement,
    EndpointDescriptor,
    HTTPMethod,
)
from api_server.domain.contracts.path_template import PathSegment, PathTemplate

__all__ = [
    "APIGroup",
    "APIInput",
    "AuthRequirement",
    "Body",
    "EmptyInput",
    "EmptyOutput",
    "EndpointDescriptor",
    "HTTPMethod",
    "PathParam",
    "PathSegment",
    "PathTemplate",
    "QueryParam",
]
