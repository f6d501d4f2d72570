from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator

from campushub.core.utils import utcnow
from campushub.schemas.base import CamelModel

EventCategory = Literal["Academic", "Sports", "Cultural", "Workshops", "Competitions"]


class Event(CamelModel):
    id: str
    title: str
    description: str = ""
    date: datetime
    time: str = ""
    start_time: str | None = None
    end_time: str | None = None
    location: str
    category: EventCategory | None = None
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    requires_registration: bool = False
    max_participants: int | None = None
    current_participants: int = 0
    cancelled: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
    created_by: str

    @property
    def is_full(self) -> bool:
        return bool(self.max_participants) and self.current_participants >= self.max_participants


class EventCreate(CamelModel):
    title: str = Field(min_length=3)
    description: str = ""
    date: datetime = Field(description="Start of the event; naive values are read as UTC.")
    time: str = ""
    start_time: str | None = None
    end_time: str | None = None
    location: str
    category: EventCategory | None = None
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    requires_registration: bool = False
    max_participants: int | None = Field(default=None, ge=1)
    cancelled: bool = False

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
