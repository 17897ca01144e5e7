"""Request decoding and service context construction.

These two functions run in every contract dispatch unit, before the
handler:

- decode_input: typed input from path parameters, query string and body
- build_service_context: 401 for required-auth endpoints without identity

Neither catches errors; DecodeError and HTTPError propagate to the error
middleware.
"""

from urllib.parse import unquote

from pydantic import TypeAdapter, ValidationError

from api_server.core.errors import DecodeError, HTTPError
from api_server.domain.contracts import APIInput, AuthRequirement, EndpointDescriptor
from api_server.domain.service_context import ServiceContext
from api_server.presentation.http.request import ServerRequest


def parse_query_string(query_string: str) -> dict[str, str]:
    """Parse a raw query string into a flat mapping.

    Pairs are split on ``&`` and then on the first ``=``. Keys and values are
    percent-decoded (``+`` is kept literally). The last occurrence of a key
    wins. Pairs without ``=``, or with an empty key or value, are ignored.

    Args:
        query_string: Query string without the leading ``?``.

    Returns:
        dict[str, str]: Decoded parameters.
    """
    parameters: dict[str, str] = {}
    for pair in query_string.split("&"):
        key, separator, value = pair.partition("=")
        if not separator or not key or not value:
            continue
        parameters[unquote(key)] = unquote(value)
    return parameters


def collect_path_parameters(
    descriptor: EndpointDescriptor, request: ServerRequest
) -> dict[str, str]:
    """Collect the values of every parameter in the full path template.

    Raises:
        RuntimeError: If the router did not capture an expected parameter.
            Routing guarantees this cannot happen for a matched route.
    """
    parameters: dict[str, str] = {}
    for name in descriptor.path_template.parameter_names:
        if name not in request.path_parameters:
            raise RuntimeError(
                f"Path parameter ':{name}' of '{descriptor.path_template}' was not captured"
            )
        parameters[name] = request.path_parameters[name]
    return parameters


def decode_input(descriptor: EndpointDescriptor, request: ServerRequest) -> APIInput:
    """Assemble the endpoint's typed input from the request.

    Raises:
        DecodeError: If request data does not match the input type.
    """
    return descriptor.input_type.decode(
        collect_path_parameters(descriptor, request),
        parse_query_string(request.query_string),
        request.body,
    )


def decode_json_body[T](body_type: type[T], body: bytes | None) -> T:
    """Decode a JSON request body into ``body_type`` (webhooks, POST SSE).

    Raises:
        DecodeError: If the body is not valid JSON or does not fit the type.
    """
    try:
        return TypeAdapter(body_type).validate_json(body or b"null")
    except ValidationError as exc:
        raise DecodeError.from_validation_error(exc) from exc


def build_service_context(
    descriptor: EndpointDescriptor, request: ServerRequest
) -> ServiceContext:
    """Derive the handler's context from the attached identity.

    Raises:
        HTTPError: 401 UNAUTHORIZED for a required-auth endpoint when the
            request carries no identity.
    """
    user_id = request.authenticated_user_id
    match descriptor.auth_requirement:
        case AuthRequirement.REQUIRED:
            if user_id is None:
                raise HTTPError.unauthorized()
            return ServiceContext.authenticated(user_id)
        case AuthRequirement.NONE:
            return lenient_service_context(request)


def lenient_service_context(request: ServerRequest) -> ServiceContext:
    """Authenticated when an identity is attached, anonymous otherwise."""
    if request.authenticated_user_id is None:
        return ServiceContext.anonymous()
    return ServiceContext.authenticated(request.authenticated_user_id)
