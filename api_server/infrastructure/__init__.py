"""Infrastructure layer - Adapters implementing domain protocols.

Structure:
- logging/: structlog console adapter (LoggerProtocol)
- security/: PyJWT bearer token verifier (AuthenticationProviderProtocol)

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
