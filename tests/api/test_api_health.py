import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from docchat.api.deps.dependencies import get_diagnostics_service
from docchat.api.main import create_app
from docchat.models.diagnostics import DiagnosticsReport, IndexStats, ProbeResult, QueryDryRun


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["message"] == "Server Healthy"
    assert "ts" in data


def test_ping_returns_plain_text(client):
    response = client.get("/api/ping")
    assert response.status_code == 200
    assert response.text == "OK\n"
    assert response.headers["content-type"].startswith("text/plain")


def test_correlation_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_diagnostics_passes_query(client):
    service = AsyncMock()
    service.run.return_value = DiagnosticsReport(
        embeddings=ProbeResult(ok=True),
        tiers=["hybrid", "vector", "local"],
        query=QueryDryRun(text="refunds", provider="fake", tier="local"),
        stats=IndexStats(documents=2, chunks=5),
        vector_probe=ProbeResult(),
    )
    client.app.dependency_overrides[get_diagnostics_service] = lambda: service

    response = client.get("/api/diag", params={"q": "refunds"})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["embeddings"]["ok"] is True
    assert data["tiers"] == ["hybrid", "vector", "local"]
    assert data["stats"]["chunks"] == 5
    assert data["vector_probe"]["ok"] is False
    assert data["query"]["tier"] == "local"
    service.run.assert_called_once_with("refunds")


def test_cors_preflight_carries_correlation_id(client):
    response = client.options(
        "/api/chat",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
    assert response.headers.get("X-Correlation-ID")
