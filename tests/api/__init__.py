"""API tests package.

End-to-end tests through ServerApplication using TestClient.
Tests the complete request/response cycle including:
- Routing and path parameter decoding
- Middleware ordering
- Response formatting (JSON, 204, SSE)
- Error envelopes and HTTP status codes

Note:
    API tests use the sample contracts and in-memory services from
    tests/utils/sample_api.py.
"""
