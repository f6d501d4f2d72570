from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from campushub.core.utils import utcnow
from campushub.schemas.base import CamelModel


class NotificationType(str, Enum):
    announcement = "announcement"
    event = "event"
    group = "group"
    message = "message"
    system = "system"
    reminder = "reminder"


class ReminderType(str, Enum):
    day = "24h"
    hour = "1h"


class PreferenceKey(str, Enum):
    """Event-related categories a user can opt out of.

    Values name the matching `NotificationPreferences` attribute.
    """

    event_registration = "event_registration"
    event_reminders_24h = "event_reminders_24h"
    event_reminders_1h = "event_reminders_1h"


class NotificationCreate(CamelModel):
    user_id: str
    title: str
    message: str
    type: NotificationType
    link: str | None = None
    event_id: str | None = None
    reminder_type: ReminderType | None = None


class Notification(NotificationCreate):
    id: str
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
