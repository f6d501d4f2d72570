"""At-most-one live push connection per user.

Single-process only: the registry is a plain dict owned by one event loop.
Running several app instances needs a shared pub/sub layer instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from campushub.core.utils import utcnow

logger = logging.getLogger(__name__)


class PushConnection(Protocol):
    """Transport handle for one live client.

    `send` must not block and must deliver frames in call order.
    """

    @property
    def is_open(self) -> bool: ...

    def send(self, frame: dict[str, Any]) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


@dataclass
class Session:
    user_id: str
    connection: PushConnection
    connected_at: datetime = field(default_factory=utcnow)


class SessionRegistry:
    """Maps user ids to their current session. Last registration wins."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def register(self, user_id: str, connection: PushConnection) -> Session | None:
        """Store `connection` for `user_id`, returning the session it replaced.

        The replaced connection is left open; the caller decides whether to close it.
        """

        previous = self._sessions.get(user_id)
        self._sessions[user_id] = Session(user_id=user_id, connection=connection)
        if previous is not None and previous.connection is not connection:
            logger.info("Session for user %s replaced by a newer connection", user_id)
            return previous
        logger.info("Session registered for user %s", user_id)
        return None

    def unregister(self, user_id: str, connection: PushConnection) -> bool:
        """Remove the session only if it still belongs to `connection`."""

        current = self._sessions.get(user_id)
        if current is None or current.connection is not connection:
            return False
        del self._sessions[user_id]
        logger.info("Session unregistered for user %s", user_id)
        return True

    def get(self, user_id: str) -> Session | None:
        return self._sessions.get(user_id)

    def is_connected(self, user_id: str) -> bool:
        session = self._sessions.get(user_id)
        return session is not None and session.connection.is_open

    def connected_user_ids(self) -> list[str]:
        return list(self._sessions)

    def send_to_user(self, user_id: str, frame: dict[str, Any]) -> bool:
        """Best-effort delivery. Returns False when the user is offline."""

        session = self._sessions.get(user_id)
        if session is None or not session.connection.is_open:
            return False
        try:
            session.connection.send(frame)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Push to user %s failed: %s", user_id, exc)
            return False
        return True


__all__ = ["PushConnection", "Session", "SessionRegistry"]
