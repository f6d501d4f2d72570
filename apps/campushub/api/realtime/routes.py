"""`/ws` push channel endpoint.

Browsers cannot set headers on a WebSocket upgrade, so the bearer token comes
in the `token` query parameter. A missing or invalid token is closed with 1008
before accept and before any session exists.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, WebSocket, status

from campushub.core.dependencies import get_account_service, get_push_channel
from campushub.services.accounts import AccountService
from campushub.services.push_channel import PushChannel, WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def push_channel_ws(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    accounts: AccountService = Depends(get_account_service),
    channel: PushChannel = Depends(get_push_channel),
) -> None:
    user = await accounts.authenticate(token) if token else None
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket)
    connection.start()
    logger.info("WebSocket connected for user %s", user.id)
    try:
        await channel.open(user, connection)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is not None:
                await channel.handle_frame(user, raw)
    finally:
        await channel.close(user.id, connection)
        logger.info("WebSocket disconnected for user %s", user.id)
