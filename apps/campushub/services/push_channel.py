"""Live push channel: WebSocket adapter plus session and frame handling.

`WebSocketConnection` gives the registry a non-blocking `send`: frames go onto
a queue drained by one writer task, so REST handlers never wait on a socket and
each client receives frames in the order they were routed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from campushub.schemas.realtime import (
    MalformedFrameError,
    TypingStartFrame,
    TypingStopFrame,
    parse_inbound_frame,
)
from campushub.schemas.users import UserPublic
from campushub.services.notifications import NotificationDispatcher
from campushub.services.session_registry import PushConnection, SessionRegistry
from campushub.services.typing_tracker import TypingTracker

logger = logging.getLogger(__name__)

SUPERSEDED_CLOSE_CODE = 4000
MAX_PENDING_FRAMES = 1000


class WebSocketConnection:
    """`PushConnection` backed by an accepted Starlette WebSocket."""

    def __init__(self, websocket: WebSocket, *, max_pending: int = MAX_PENDING_FRAMES) -> None:
        self._websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=max_pending)
        self._writer: asyncio.Task[None] | None = None
        self._closing = False
        self._broken = False

    @property
    def is_open(self) -> bool:
        return (
            not self._closing
            and not self._broken
            and self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def send(self, frame: dict[str, Any]) -> None:
        if self._closing or self._broken:
            return
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            logger.warning("Dropping push frame %s: outbound queue full", frame.get("type"))

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self._closing:
            return
        self._closing = True
        if self._writer is not None and not self._writer.done():
            # Flush what is already queued before the close frame.
            try:
                self._queue.put_nowait(None)
            except asyncio.QueueFull:
                self._writer.cancel()
            await asyncio.wait({self._writer})
        if (
            self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        ):
            try:
                await self._websocket.close(code=code, reason=reason)
            except RuntimeError as exc:
                logger.debug("WebSocket already closed: %s", exc)

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            try:
                await self._websocket.send_json(frame)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                logger.warning("Push delivery failed, stopping writer: %s", exc)
                self._broken = True
                return


class PushChannel:
    """Connects live sessions to the registry, the typing tracker and the
    notification snapshot."""

    def __init__(
        self,
        sessions: SessionRegistry,
        typing: TypingTracker,
        notifications: NotificationDispatcher,
        *,
        close_superseded: bool = False,
    ) -> None:
        self._sessions = sessions
        self._typing = typing
        self._notifications = notifications
        self._close_superseded = close_superseded

    async def open(self, user: UserPublic, connection: PushConnection) -> None:
        previous = self._sessions.register(user.id, connection)
        if previous is not None and self._close_superseded:
            await previous.connection.close(
                code=SUPERSEDED_CLOSE_CODE, reason="Superseded by a newer connection"
            )

        snapshot = await self._notifications.snapshot(user.id)
        connection.send(snapshot.to_frame())

    async def handle_frame(self, user: UserPublic, raw: str | bytes) -> None:
        try:
            frame = parse_inbound_frame(raw)
        except MalformedFrameError as exc:
            logger.warning("Malformed frame from user %s: %s", user.id, exc)
            return

        try:
            if isinstance(frame, TypingStartFrame):
                await self._typing.on_typing_start(frame.group_id, user.id, user.full_name)
            elif isinstance(frame, TypingStopFrame):
                await self._typing.on_typing_stop(frame.group_id, user.id)
            else:
                logger.debug("Ignoring unknown frame type %r from user %s", frame.type, user.id)
        except Exception:
            logger.exception("Failed to handle %s frame from user %s", frame.type, user.id)

    async def close(self, user_id: str, connection: PushConnection) -> None:
        # A superseded connection closing must not touch the newer session's state.
        if self._sessions.unregister(user_id, connection):
            await self._typing.clear_user(user_id)
        await connection.close()


__all__ = ["PushChannel", "WebSocketConnection"]
