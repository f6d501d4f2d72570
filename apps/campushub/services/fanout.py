"""Deliver push events to one user, a group's members, or everyone online."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from campushub.schemas.realtime import PushEvent
from campushub.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class FanoutRouter:
    """Resolves an audience to sessions and hands each one the rendered frame.

    Group membership is supplied by the caller; the router never reads the
    datastore. Each event is rendered once and dispatched synchronously, so a
    single recipient sees events in the order they were routed.
    """

    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def to_user(self, user_id: str, event: PushEvent) -> bool:
        return self._sessions.send_to_user(user_id, event.to_frame())

    def to_group(
        self,
        group_id: str,
        event: PushEvent,
        member_ids: Iterable[str],
        *,
        exclude: str | None = None,
    ) -> int:
        frame = event.to_frame()
        delivered = 0
        for member_id in dict.fromkeys(member_ids):
            if member_id == exclude:
                continue
            if self._sessions.send_to_user(member_id, frame):
                delivered += 1
        logger.debug("%s for group %s delivered to %d session(s)", event.type.value, group_id, delivered)
        return delivered

    def to_all(self, event: PushEvent) -> int:
        frame = event.to_frame()
        delivered = 0
        for user_id in self._sessions.connected_user_ids():
            if self._sessions.send_to_user(user_id, frame):
                delivered += 1
        return delivered


__all__ = ["FanoutRouter"]
