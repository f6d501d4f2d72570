from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from campushub.api import register_routes
from campushub.core.dependencies import get_datastore
from campushub.core.exceptions import register_exception_handlers
from campushub.schemas.users import UserRole


def create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    register_routes(app)
    return app


@pytest.fixture
def client() -> Iterator[TestClient]:
    # One portal for the whole test so HTTP calls and WebSocket sessions share a loop.
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def signup(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user over the API; returns `{"user", "token", "headers"}`."""

    def _signup(name: str, *, admin: bool = False) -> dict[str, Any]:
        resp = client.post(
            "/api/auth/register",
            json={
                "email": f"{name.lower()}@campus.edu",
                "password": "secret123",
                "fullName": name,
                "department": "Computer Science",
                "year": "3rd Year",
            },
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        if admin:
            asyncio.run(_promote(body["user"]["id"]))
            body["user"]["role"] = UserRole.admin.value
        body["headers"] = {"Authorization": f"Bearer {body['token']}"}
        return body

    return _signup


async def _promote(user_id: str) -> None:
    store = get_datastore()
    user = await store.get_user(user_id)
    assert user is not None
    user.role = UserRole.admin
    await store.save_user(user)
