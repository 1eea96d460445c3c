"""Unit tests for server.server module."""

import pytest
from fastapi.testclient import TestClient

from infrastructure.logging import CORRELATION_ID_HEADER
from server import server


@pytest.fixture
def client():
    # Lifespan is not entered, no provider clients are built
    return TestClient(server.handler)


@pytest.mark.unit
def test_cors_middleware_configured():
    middleware_classes = [m.cls.__name__ for m in server.handler.user_middleware]
    assert "CORSMiddleware" in middleware_classes


@pytest.mark.unit
def test_routes_included():
    paths = {route.path for route in server.handler.routes}
    assert {
        "/health",
        "/ready",
        "/version",
        "/listings",
        "/cars",
        "/api/submissions",
        "/api/submissions/channels/health",
        "/api/send-to-email",
        "/api/send-to-whatsapp",
    } <= paths


@pytest.mark.unit
def test_rate_limiter_attached():
    assert server.handler.state.limiter is server.limiter


@pytest.mark.unit
def test_correlation_id_generated(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.headers[CORRELATION_ID_HEADER]


@pytest.mark.unit
def test_correlation_id_echoed(client):
    response = client.get("/health", headers={CORRELATION_ID_HEADER: "req-42"})

    assert response.headers[CORRELATION_ID_HEADER] == "req-42"


@pytest.mark.unit
def test_cors_preflight(client):
    response = client.options(
        "/api/submissions",
        headers={
            "Origin": "https://maabhawanicarbazar.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


@pytest.mark.unit
def test_unknown_route_is_404(client):
    assert client.get("/does-not-exist").status_code == 404
