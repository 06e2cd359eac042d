"""Tests for the health endpoint.

The health endpoint is a liveness check that:
- Does not require a session
- Always returns 200 if the process is running
"""

from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for GET /health"""

    def test_health_returns_200(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_body(self, client: TestClient):
        response = client.get("/health")
        assert response.json() == {"status": "ok"}

    def test_health_ignores_invalid_session(self, client: TestClient):
        response = client.get("/health", headers={"session": "bad"})
        assert response.status_code == 200
