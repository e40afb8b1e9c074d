"""Tests for health endpoint."""

from academics import __version__


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_returns_version(self, client):
        assert client.get("/health").json()["version"] == __version__

    def test_health_returns_timestamp(self, client):
        """Timestamp is ISO formatted."""
        assert "T" in client.get("/health").json()["timestamp"]

    def test_cors_headers(self, client):
        """Browser clients from any origin are allowed by default."""
        response = client.get("/health", headers={"Origin": "http://localhost:5173"})
        assert response.headers["access-control-allow-origin"] == "*"
