from __future__ import annotations

from datetime import datetime, timedelta, timezone


def _event_payload(**overrides) -> dict:
    payload = {
        "title": "Hackathon",
        "description": "24 hours of building",
        "date": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
        "location": "Main Hall",
        "category": "Competitions",
        "requiresRegistration": True,
        "maxParticipants": 1,
    }
    payload.update(overrides)
    return payload


def test_event_registration_flow(client, signup) -> None:
    admin = signup("Ada", admin=True)
    sam = signup("Sam")
    tia = signup("Tia")

    resp = client.post("/api/events", json=_event_payload(), headers=sam["headers"])
    assert resp.status_code == 403

    resp = client.post("/api/events", json=_event_payload(), headers=admin["headers"])
    assert resp.status_code == 201
    event = resp.json()
    assert event["currentParticipants"] == 0

    titles = [n["title"] for n in client.get("/api/notifications", headers=sam["headers"]).json()]
    assert titles == ["New Event Added"]

    url = f"/api/events/{event['id']}"
    assert client.post(f"{url}/register", headers=sam["headers"]).json()["currentParticipants"] == 1
    # A repeat registration is a no-op rather than an error.
    assert client.post(f"{url}/register", headers=sam["headers"]).json()["currentParticipants"] == 1

    resp = client.post(f"{url}/register", headers=tia["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "Cannot register for event"

    titles = [n["title"] for n in client.get("/api/notifications", headers=sam["headers"]).json()]
    assert titles == ["Registration Confirmed", "New Event Added"]

    assert client.post(f"{url}/unregister", headers=sam["headers"]).json()["currentParticipants"] == 0
    assert client.post(f"{url}/register", headers=tia["headers"]).status_code == 200

    assert client.delete(url, headers=admin["headers"]).status_code == 200
    assert client.get(url, headers=admin["headers"]).status_code == 404


def test_naive_event_date_is_read_as_utc(client, signup) -> None:
    admin = signup("Ada", admin=True)
    resp = client.post(
        "/api/events",
        json=_event_payload(date="2030-05-01T18:00:00"),
        headers=admin["headers"],
    )
    assert resp.status_code == 201
    assert datetime.fromisoformat(resp.json()["date"]) == datetime(
        2030, 5, 1, 18, 0, tzinfo=timezone.utc
    )


def test_announcements(client, signup) -> None:
    admin = signup("Ada", admin=True)
    sam = signup("Sam")

    resp = client.post(
        "/api/announcements",
        json={"title": "Library hours", "description": "Open until midnight", "priority": "urgent"},
        headers=admin["headers"],
    )
    assert resp.status_code == 201
    announcement = resp.json()
    assert announcement["authorName"] == "Ada"

    listed = client.get("/api/announcements", headers=sam["headers"]).json()
    assert [a["id"] for a in listed] == [announcement["id"]]

    notifications = client.get("/api/notifications", headers=sam["headers"]).json()
    assert [n["title"] for n in notifications] == ["New Urgent Announcement"]
    assert client.get("/api/notifications", headers=admin["headers"]).json() == []

    resp = client.delete(f"/api/announcements/{announcement['id']}", headers=sam["headers"])
    assert resp.status_code == 403
    resp = client.delete(f"/api/announcements/{announcement['id']}", headers=admin["headers"])
    assert resp.status_code == 200
    assert client.get("/api/announcements", headers=sam["headers"]).json() == []
