"""
Test service-level endpoints and the error envelope.
"""

from fastapi.testclient import TestClient


def test_root_endpoint(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_health_check(client: TestClient):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_unknown_route_uses_error_envelope(client: TestClient):
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found", "message": "Not Found"}
