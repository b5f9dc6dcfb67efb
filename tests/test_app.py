from fastapi.testclient import TestClient

from stemforum.config import settings
from stemforum.main import app
from stemforum.services.article_service import article_service


def test_root_banner(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_reports_connected_database(client):
    body = client.get("/api/health").json()

    assert body["status"] == "OK"
    assert body["database"] == "connected"


def test_health_reports_disconnected_database(client, db_down):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"


def test_unknown_route_echoes_path_and_method(client):
    response = client.delete("/api/nothing/here")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Not found",
        "path": "/api/nothing/here",
        "method": "DELETE",
        "message": "The requested endpoint does not exist",
    }


def test_security_headers_present(client):
    response = client.get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Process-Time" in response.headers


def test_cors_allows_configured_origin(client):
    response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_unhandled_error_shows_message_outside_production(monkeypatch):
    async def boom(article_id):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(article_service, "get_stats", boom)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/article/1/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "message": "kaboom"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_unhandled_error_hides_message_in_production(monkeypatch):
    async def boom(article_id):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(article_service, "get_stats", boom)
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/article/1/stats")

    assert response.status_code == 500
    assert response.json()["message"] == "Something went wrong"
