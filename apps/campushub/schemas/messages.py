from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from campushub.core.utils import utcnow
from campushub.schemas.base import CamelModel


class MessageType(str, Enum):
    text = "text"
    image = "image"
    file = "file"


class Message(CamelModel):
    """A chat message in a group.

    Author name and avatar are captured when the message is created and are not
    refreshed if the author later edits their profile.
    """

    id: str
    group_id: str
    author_id: str
    author_name: str
    author_avatar: str | None = None
    content: str
    type: MessageType = MessageType.text
    file_url: str | None = None
    file_name: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    edited_at: datetime | None = None
    likes: int = 0
    liked_by: list[str] = Field(default_factory=list)
    reactions: dict[str, list[str]] = Field(default_factory=dict)
    reply_to: str | None = None
    is_pinned: bool = False


class MessageCreate(CamelModel):
    content: str
    type: MessageType = MessageType.text
    file_url: str | None = None
    file_name: str | None = None
    reply_to: str | None = None


class MessageEdit(CamelModel):
    content: str


class ReactionRequest(CamelModel):
    emoji: str


class MessagePage(CamelModel):
    messages: list[Message]
    total: int
    has_more: bool


class MessageRef(CamelModel):
    """Payload for deletions, where the message body no longer exists."""

    message_id: str
    group_id: str
