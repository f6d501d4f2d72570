from __future__ import annotations

import os
import socket
from collections.abc import Iterator
from typing import Any

import pytest

# Must run before campushub.core.settings is imported: under APP_ENV=test the
# .env files are skipped and the sweep stays off unless a test turns it on.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ENABLE_REMINDER_SWEEP", "false")


class NetworkBlockedError(RuntimeError):
    pass


def _no_network(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Outbound network is blocked in tests; use the `network` or `integration` "
        "marker, or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    allowed = os.getenv("ALLOW_NETWORK") == "1" or any(
        request.node.get_closest_marker(name) for name in ("integration", "network")
    )
    if allowed:
        return
    monkeypatch.setattr(socket, "create_connection", _no_network)
    monkeypatch.setattr(socket, "getaddrinfo", _no_network)


@pytest.fixture(autouse=True)
def _fresh_dependencies() -> Iterator[None]:
    """Every test gets its own datastore, session registry and services."""

    from campushub.core.dependencies import clear_dependency_caches

    clear_dependency_caches()
    yield
    clear_dependency_caches()
