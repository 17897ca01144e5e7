"""Presentation layer - HTTP dispatch on top of Starlette.

Structure:
- http/: Request wrapper, buffered/streaming responses, JSON encoding
- middleware/: Middleware chain and built-in middlewares
- routing/: Route table, registrars, request decoding, webhooks
- sse/: SSE stream engine
- server.py: ASGI server application

The presentation layer depends on the domain layer but contains NO
business logic.
"""
