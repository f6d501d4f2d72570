from campushub.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
    register_exception_handlers,
)
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient


def create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def _boom() -> None:
        raise RuntimeError("kaboom")

    @app.get("/missing")
    def _missing() -> None:
        raise NotFoundError("Group not found", details={"group_id": "g1"})

    @app.get("/forbidden")
    def _forbidden() -> None:
        raise ForbiddenError("nope")

    @app.get("/invalid")
    def _invalid() -> None:
        raise ValidationFailedError("Emoji is required")

    @app.get("/auth")
    def _auth() -> None:
        raise AuthenticationError("Authentication required")

    @app.get("/http")
    def _http() -> None:
        raise HTTPException(status_code=404, detail="not found")

    @app.get("/needs-int")
    def _needs_int(x: int) -> dict[str, int]:
        return {"x": x}

    return app


def test_domain_errors_map_to_status_and_shape():
    client = TestClient(create_app())
    expected = {
        "/missing": (404, "not_found", "NotFoundError"),
        "/forbidden": (403, "forbidden", "ForbiddenError"),
        "/invalid": (400, "validation_failed", "ValidationFailedError"),
        "/auth": (401, "unauthorized", "AuthenticationError"),
    }
    for path, (status_code, code, type_) in expected.items():
        resp = client.get(path)
        assert resp.status_code == status_code
        data = resp.json()
        assert data["code"] == code
        assert data["type"] == type_


def test_details_are_included_when_present():
    client = TestClient(create_app())
    data = client.get("/missing").json()
    assert data["error"] == "Group not found"
    assert data["details"] == {"group_id": "g1"}
    assert "details" not in client.get("/forbidden").json()


def test_http_exception_is_normalized():
    client = TestClient(create_app())
    resp = client.get("/http")
    assert resp.status_code == 404
    data = resp.json()
    assert data["error"] == "not found"
    assert data["code"] == "http_exception"


def test_validation_errors_are_normalized():
    client = TestClient(create_app())
    resp = client.get("/needs-int")
    assert resp.status_code == 422
    data = resp.json()
    assert data["code"] == "validation_error"
    assert isinstance(data["details"], list)


def test_unhandled_exceptions_do_not_leak_message():
    client = TestClient(create_app(), raise_server_exceptions=False)
    resp = client.get("/boom")
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "Internal server error"
    assert data["code"] == "internal_error"
    assert "kaboom" not in resp.text


def test_authentication_errors_carry_bearer_challenge():
    client = TestClient(create_app())
    resp = client.get("/auth")
    assert resp.headers["www-authenticate"] == "Bearer"
    assert client.get("/forbidden").headers.get("www-authenticate") is None
