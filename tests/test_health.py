"""Tests for the /health endpoint."""


class _DownDbManager:
    async def health_check(self):
        return {"healthy": False, "error": "connection refused"}


def test_health_reports_version_and_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Healthy"
    assert body["version"] == "1.0.0"
    assert body["logging_configured"] is True
    assert body["log_level"] == "WARNING"
    assert body["database"]["healthy"] is True


def test_health_returns_503_when_database_down(test_app, client):
    test_app.state.db_manager = _DownDbManager()

    response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "Unhealthy"
    assert body["database"] == {"healthy": False, "error": "connection refused"}
