"""
Server entry point.

Composition root: builds the ServerApplication from settings and wires the
infrastructure adapters the container selects.

Middleware order (outermost first):
    CORSMiddleware (decorates every response, errors included)
    TraceMiddleware (request correlation)
    ErrorMiddleware (exceptions to JSON envelopes)
    AuthMiddleware (only when a JWT secret key is configured)

Run with:
    python -m api_server.main
or:
    uvicorn api_server.main:app
"""

from api_server.core.config import Settings, settings
from api_server.core.container import get_authentication_provider, get_logger
from api_server.presentation.middleware import CORSConfiguration, TraceMiddleware
from api_server.presentation.server import ServerApplication


async def health() -> dict[str, str]:
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        dict: Health status indicator.
    """
    return {"status": "healthy"}


def create_server(app_settings: Settings = settings) -> ServerApplication:
    """Build a fully configured server.

    Args:
        app_settings: Settings to configure the server from.

    Returns:
        ServerApplication: Server with middlewares and the health route.
    """
    logger = get_logger()
    server = ServerApplication(settings=app_settings, logger=logger)

    server.use_cors(CORSConfiguration.from_settings(app_settings))
    server.use(TraceMiddleware(logger))
    server.use_error_middleware(expose_details=app_settings.debug)

    provider = get_authentication_provider()
    if provider is not None:
        server.use_auth(provider)

    server.routes.get("health", health)
    return server


app = create_server()


if __name__ == "__main__":
    app.run()
