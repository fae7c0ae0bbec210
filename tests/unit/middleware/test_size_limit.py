"""Tests for request size limit middleware."""

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from docforge.middleware.size_limit import RequestSizeLimitMiddleware


async def echo_endpoint(request: Request) -> Response:
    body = await request.body()
    return JSONResponse({"size": len(body)})


@pytest.fixture
def client():
    """Client for an app limited to 1KB bodies."""
    app = Starlette(routes=[Route("/echo", echo_endpoint, methods=["POST"])])
    app.add_middleware(RequestSizeLimitMiddleware, max_size=1024)
    return TestClient(app, raise_server_exceptions=False)


class TestRequestSizeLimitMiddleware:
    """Tests for RequestSizeLimitMiddleware."""

    def test_allows_request_under_limit(self, client):
        """Bodies under the limit reach the endpoint."""
        response = client.post("/echo", content="x" * 500)

        assert response.status_code == 200
        assert response.json()["size"] == 500

    def test_allows_request_at_limit(self, client):
        """A body exactly at the limit is allowed."""
        response = client.post("/echo", content="x" * 1024)

        assert response.status_code == 200

    def test_rejects_request_over_limit(self, client):
        """Bodies over the limit are rejected with 413."""
        response = client.post("/echo", content="x" * 2048)

        assert response.status_code == 413
        assert "exceeds maximum size of 1024 bytes" in response.json()["detail"]

    def test_allows_empty_body(self, client):
        """Empty bodies pass through."""
        response = client.post("/echo", content="")

        assert response.status_code == 200
        assert response.json()["size"] == 0

    def test_defaults_to_configured_limit(self):
        """Without an explicit limit the configured maximum applies."""
        from docforge.config import settings

        middleware = RequestSizeLimitMiddleware(Starlette())

        assert middleware.max_size == settings.max_request_size_bytes
