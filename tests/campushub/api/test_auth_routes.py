from __future__ import annotations


def test_register_login_and_profile(client, signup) -> None:
    body = signup("Alice")
    user = body["user"]
    assert user["email"] == "alice@campus.edu"
    assert user["role"] == "student"
    assert user["notificationPreferences"] == {
        "eventRegistration": True,
        "eventReminders24h": True,
        "eventReminders1h": True,
    }
    assert "password" not in user and "passwordHash" not in user

    resp = client.post(
        "/api/auth/login", json={"email": "ALICE@campus.edu", "password": "secret123"}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["id"]

    resp = client.get("/api/users/profile", headers=body["headers"])
    assert resp.status_code == 200
    assert resp.json()["fullName"] == "Alice"


def test_duplicate_email_and_bad_password(client, signup) -> None:
    signup("Alice")
    resp = client.post(
        "/api/auth/register",
        json={
            "email": "alice@campus.edu",
            "password": "secret123",
            "fullName": "Alice Again",
            "department": "Mathematics",
            "year": "1st Year",
        },
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Email already registered"

    resp = client.post("/api/auth/login", json={"email": "alice@campus.edu", "password": "wrong-pw"})
    assert resp.status_code == 401


def test_invalid_registration_payload_is_422(client) -> None:
    resp = client.post("/api/auth/register", json={"email": "nope", "password": "x"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_protected_routes_require_a_valid_token(client) -> None:
    assert client.get("/api/users/profile").status_code == 401
    resp = client.get("/api/users/profile", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["code"] == "unauthorized"


def test_update_profile_and_preferences(client, signup) -> None:
    body = signup("Alice")

    resp = client.patch(
        "/api/users/profile", json={"fullName": "Alice Liddell"}, headers=body["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["fullName"] == "Alice Liddell"
    assert resp.json()["department"] == "Computer Science"

    resp = client.patch(
        "/api/users/profile/notification-preferences",
        json={"eventReminders1h": False},
        headers=body["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["notificationPreferences"] == {
        "eventRegistration": True,
        "eventReminders24h": True,
        "eventReminders1h": False,
    }


def test_healthz_reports_sessions(client) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "connectedSessions": 0}
