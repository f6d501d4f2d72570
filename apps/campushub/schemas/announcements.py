from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from campushub.core.utils import utcnow
from campushub.schemas.base import CamelModel


class Priority(str, Enum):
    normal = "normal"
    important = "important"
    urgent = "urgent"


class Announcement(CamelModel):
    id: str
    title: str
    description: str
    priority: Priority = Priority.normal
    created_at: datetime = Field(default_factory=utcnow)
    created_by: str
    author_name: str


class AnnouncementCreate(CamelModel):
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    priority: Priority = Priority.normal
