"""Domain layer - Contracts, request context and wire events.

This layer contains the types the dispatch layer reasons about and the
protocols (ports) it depends on. It never touches the HTTP engine's
request or response objects.

Structure:
- contracts/: Endpoint descriptors, path templates, typed inputs
- events/: SSE wire events
- protocols/: Logger, authentication provider, API service ports
- service_context.py: Per-request anonymous/authenticated context
"""
