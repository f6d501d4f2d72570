from __future__ import annotations


def _make_group(client, admin) -> dict:
    resp = client.post(
        "/api/groups",
        json={"name": "Robotics Club", "description": "Build bots", "category": "Clubs"},
        headers=admin["headers"],
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_only_admins_create_groups(client, signup) -> None:
    student = signup("Sam")
    resp = client.post(
        "/api/groups",
        json={"name": "Robotics Club", "category": "Clubs"},
        headers=student["headers"],
    )
    assert resp.status_code == 403


def test_group_lifecycle(client, signup) -> None:
    admin = signup("Ada", admin=True)
    student = signup("Sam")
    group = _make_group(client, admin)
    assert group["memberRoles"] == {admin["user"]["id"]: "creator"}
    assert group["memberCount"] == 1

    resp = client.post(f"/api/groups/{group['id']}/join", headers=student["headers"])
    assert resp.status_code == 200
    data = resp.json()
    assert data["group"]["memberCount"] == 2
    assert group["id"] in data["user"]["joinedGroups"]

    members = client.get(f"/api/groups/{group['id']}/members", headers=student["headers"]).json()
    assert {m["fullName"]: m["groupRole"] for m in members} == {"Ada": "creator", "Sam": "member"}

    resp = client.patch(
        f"/api/groups/{group['id']}/members/{student['user']['id']}/role",
        json={"role": "creator"},
        headers=admin["headers"],
    )
    assert resp.status_code == 422

    resp = client.patch(
        f"/api/groups/{group['id']}/members/{student['user']['id']}/role",
        json={"role": "admin"},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["memberRoles"][student["user"]["id"]] == "admin"

    resp = client.patch(
        f"/api/groups/{group['id']}/rules", json={"rules": "Be kind"}, headers=student["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["rules"] == "Be kind"

    resp = client.post(f"/api/groups/{group['id']}/leave", headers=admin["headers"])
    assert resp.status_code == 403

    resp = client.post(f"/api/groups/{group['id']}/leave", headers=student["headers"])
    assert resp.status_code == 200
    assert student["user"]["id"] not in resp.json()["group"]["memberRoles"]

    assert client.delete(f"/api/groups/{group['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/groups/{group['id']}", headers=admin["headers"]).status_code == 404


def test_posts_and_messages_over_http(client, signup) -> None:
    admin = signup("Ada", admin=True)
    student = signup("Sam")
    outsider = signup("Olga")
    group = _make_group(client, admin)
    client.post(f"/api/groups/{group['id']}/join", headers=student["headers"])

    resp = client.post(
        f"/api/groups/{group['id']}/posts", json={"content": "Kickoff"}, headers=student["headers"]
    )
    assert resp.status_code == 201
    post = resp.json()

    page = client.get(f"/api/groups/{group['id']}/posts", headers=outsider["headers"]).json()
    assert page["total"] == 1 and page["hasMore"] is False

    resp = client.post(
        f"/api/groups/{group['id']}/posts/{post['id']}/like", headers=admin["headers"]
    )
    assert resp.json()["likes"] == 1

    resp = client.post(
        f"/api/groups/{group['id']}/messages", json={"content": "hi"}, headers=outsider["headers"]
    )
    assert resp.status_code == 403

    resp = client.post(
        f"/api/groups/{group['id']}/messages", json={"content": "hello"}, headers=student["headers"]
    )
    assert resp.status_code == 201
    message = resp.json()
    assert message["authorName"] == "Sam"
    assert message["isPinned"] is False

    resp = client.get(f"/api/groups/{group['id']}/messages", headers=outsider["headers"])
    assert resp.status_code == 403
    page = client.get(f"/api/groups/{group['id']}/messages", headers=student["headers"]).json()
    assert [m["id"] for m in page["messages"]] == [message["id"]]

    notifications = client.get("/api/notifications", headers=admin["headers"]).json()
    assert [n["title"] for n in notifications] == ["New Post in Group"]

    resp = client.delete(
        f"/api/groups/{group['id']}/posts/{post['id']}", headers=admin["headers"]
    )
    assert resp.status_code == 200
