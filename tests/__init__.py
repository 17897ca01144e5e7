"""Test suite for the API server.

Test structure:
- unit/: Unit tests - one module per unit, collaborators mocked
- api/: API tests - full request/response cycle through the ASGI app
- utils/: Request builders, sample contracts and services
"""
