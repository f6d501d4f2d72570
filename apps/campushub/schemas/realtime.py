"""Wire frames for the `/ws` push channel.

Inbound frames are `{"type": ..., ...payload}` envelopes. Only typing frames are
recognised; anything else parses to `UnknownFrame` so callers can ignore it
explicitly. Outbound frames are always `{"type": ..., "data": ...}`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from campushub.schemas.base import CamelModel, to_wire
from campushub.schemas.users import UserPublic


class OutboundEventType(str, Enum):
    notifications = "notifications"
    notification = "notification"
    announcement_created = "announcement_created"
    event_created = "event_created"
    event_registration_update = "event_registration_update"
    group_created = "group_created"
    group_deleted = "group_deleted"
    member_joined = "member_joined"
    member_left = "member_left"
    member_role_changed = "member_role_changed"
    group_post_created = "group_post_created"
    group_post_deleted = "group_post_deleted"
    group_post_liked = "group_post_liked"
    message_created = "message_created"
    message_edited = "message_edited"
    message_deleted = "message_deleted"
    message_liked = "message_liked"
    message_reacted = "message_reacted"
    message_pinned = "message_pinned"
    message_unpinned = "message_unpinned"
    typing_update = "typing_update"


class PushEvent(CamelModel):
    type: OutboundEventType
    data: Any = None

    def to_frame(self) -> dict[str, Any]:
        return {"type": self.type.value, "data": to_wire(self.data)}


# --- Outbound payloads without a stored entity behind them ---


class TypingUser(CamelModel):
    user_id: str
    user_name: str


class TypingUpdate(CamelModel):
    group_id: str
    typing_users: list[TypingUser] = Field(default_factory=list)


class GroupRef(CamelModel):
    id: str


class MemberJoined(CamelModel):
    group_id: str
    user: UserPublic


class MemberLeft(CamelModel):
    group_id: str
    user_id: str


class MemberRoleChanged(CamelModel):
    group_id: str
    member_id: str
    role: str


class PostRef(CamelModel):
    post_id: str
    group_id: str


# --- Inbound frames ---


class TypingStartFrame(CamelModel):
    type: Literal["typing_start"]
    group_id: str


class TypingStopFrame(CamelModel):
    type: Literal["typing_stop"]
    group_id: str


class UnknownFrame(CamelModel):
    type: str


KnownFrame = Annotated[Union[TypingStartFrame, TypingStopFrame], Field(discriminator="type")]
InboundFrame = Union[TypingStartFrame, TypingStopFrame, UnknownFrame]

_known_frame_adapter: TypeAdapter[KnownFrame] = TypeAdapter(KnownFrame)
_KNOWN_TYPES = frozenset({"typing_start", "typing_stop"})


class MalformedFrameError(ValueError):
    """Inbound text was not a JSON object with a string `type`, or a known
    frame was missing its payload."""


def parse_inbound_frame(raw: str | bytes) -> InboundFrame:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedFrameError(f"invalid JSON: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("type"), str):
        raise MalformedFrameError("frame must be an object with a string 'type'")

    if payload["type"] not in _KNOWN_TYPES:
        return UnknownFrame(type=payload["type"])

    try:
        return _known_frame_adapter.validate_python(payload)
    except ValidationError as exc:
        raise MalformedFrameError(str(exc)) from exc


__all__ = [
    "GroupRef",
    "InboundFrame",
    "MalformedFrameError",
    "MemberJoined",
    "MemberLeft",
    "MemberRoleChanged",
    "OutboundEventType",
    "PostRef",
    "PushEvent",
    "TypingStartFrame",
    "TypingStopFrame",
    "TypingUpdate",
    "TypingUser",
    "UnknownFrame",
    "parse_inbound_frame",
]
