from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from unittest.mock import patch


def test_read_root(client: TestClient):
    """Test that the API is alive."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "API is ready", "docs": "/docs"}


def test_liveness(client: TestClient):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_readiness_ok(client: TestClient):
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "ok"}


def test_readiness_degraded(client: TestClient):
    """A failed ping is reported as 503 rather than an empty success."""
    with patch("speedtype.api.health.ping", return_value=False):
        response = client.get("/health/ready")
    assert response.status_code == 503
    assert "degraded" in response.json()["detail"]


def test_store_failure_maps_to_service_unavailable(client: TestClient):
    """An unreachable database surfaces as an explicit 503 on data routes."""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch(
        "speedtype.crud.crud.get_top_users", side_effect=error
    ):
        response = client.get("/leaderboard")
    assert response.status_code == 503


def test_cors_headers(client: TestClient):
    response = client.get("/", headers={"Origin": "http://localhost:3000"})
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
