from __future__ import annotations

from fastapi.testclient import TestClient


def test_preserves_incoming_request_id_header(client: TestClient) -> None:
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient) -> None:
    resp = client.get("/api/users")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient) -> None:
    resp = client.get("/api/users/42", headers={"X-Request-ID": "req-404"})

    assert resp.status_code == 404
    assert resp.json()["error"]["request_id"] == "req-404"


def test_unexpected_error_keeps_request_id(app) -> None:
    from app.api.routes.users import get_user_store

    class BrokenStore:
        def get_all(self):
            raise RuntimeError("backing map corrupted")

    app.dependency_overrides[get_user_store] = lambda: BrokenStore()
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/api/users", headers={"X-Request-ID": "req-500"})

    assert resp.status_code == 500
    assert resp.headers.get("X-Request-ID") == "req-500"
    error = resp.json()["error"]
    assert error["code"] == "internal_server_error"
    assert error["request_id"] == "req-500"
    assert "corrupted" not in error["message"]
