from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app

client = TestClient(app)


def test_banner():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert "timestamp" in r.json()


def test_unknown_route():
    r = client.get("/api/v1/nowhere")
    assert r.status_code == 404
    assert r.json() == {"error": "API endpoint not found", "path": "/api/v1/nowhere"}


def _boom():
    raise RuntimeError("database exploded")


app.add_api_route("/_boom", _boom)


def test_internal_error_hides_message_outside_development(monkeypatch):
    monkeypatch.setattr(settings, "env", "production")
    r = TestClient(app, raise_server_exceptions=False).get("/_boom")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal Server Error", "message": "Something went wrong"}


def test_internal_error_detail_in_development(monkeypatch):
    monkeypatch.setattr(settings, "env", "development")
    r = TestClient(app, raise_server_exceptions=False).get("/_boom")
    assert r.json()["message"] == "database exploded"
