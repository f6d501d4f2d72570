"""Periodic event-reminder sweep.

Every pass looks at each non-cancelled event and, when its start falls inside
one of the reminder windows, notifies every registered user once. A marker per
(event, user, reminder type) stops later passes from repeating a reminder.

The windows are 0.2 hours wide, which a 5-minute cadence always lands in. An
event rescheduled across a window between two passes can still miss it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from campushub.core.utils import utcnow
from campushub.schemas.events import Event
from campushub.schemas.notifications import (
    NotificationCreate,
    NotificationType,
    PreferenceKey,
    ReminderType,
)
from campushub.services.datastore import DataStore
from campushub.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderWindow:
    reminder_type: ReminderType
    min_hours: float
    max_hours: float
    preference: PreferenceKey
    label: str

    def contains(self, hours_until_start: float) -> bool:
        return self.min_hours < hours_until_start < self.max_hours


REMINDER_WINDOWS: tuple[ReminderWindow, ...] = (
    ReminderWindow(ReminderType.day, 23.9, 24.1, PreferenceKey.event_reminders_24h, "24 hours"),
    ReminderWindow(ReminderType.hour, 0.9, 1.1, PreferenceKey.event_reminders_1h, "1 hour"),
)

ReminderKey = tuple[str, str, ReminderType]


class ReminderSweeper:
    def __init__(
        self,
        store: DataStore,
        dispatcher: NotificationDispatcher,
        *,
        interval_seconds: float = 300.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._sent: set[ReminderKey] = set()

    def already_sent(self, event_id: str, user_id: str, reminder_type: ReminderType) -> bool:
        return (event_id, user_id, reminder_type) in self._sent

    async def sweep(self, now: datetime | None = None) -> int:
        """Run one pass and return how many reminders were created."""

        now = now or self._clock()
        created = 0
        for event in await self._store.list_events():
            if event.cancelled:
                continue
            try:
                created += await self._sweep_event(event, now)
            except Exception:
                logger.exception("Reminder sweep skipped event %s", event.id)
        if created:
            logger.info("Reminder sweep sent %d reminder(s)", created)
        return created

    async def run(self) -> None:
        """Sweep forever at the configured interval. Cancel the task to stop."""

        logger.info("Reminder sweep started (every %.0fs)", self._interval_seconds)
        while True:
            try:
                await self.sweep()
            except Exception:
                logger.exception("Reminder sweep pass failed")
            await asyncio.sleep(self._interval_seconds)

    async def _sweep_event(self, event: Event, now: datetime) -> int:
        hours_until_start = (event.date - now).total_seconds() / 3600
        windows = [w for w in REMINDER_WINDOWS if w.contains(hours_until_start)]
        if not windows:
            return 0

        created = 0
        registered = await self._store.list_registrations(event.id)
        for window in windows:
            for user_id in registered:
                try:
                    if await self._remind(event, user_id, window):
                        created += 1
                except Exception:
                    logger.exception(
                        "Failed to send %s reminder for event %s to user %s",
                        window.reminder_type.value,
                        event.id,
                        user_id,
                    )
        return created

    async def _remind(self, event: Event, user_id: str, window: ReminderWindow) -> bool:
        key: ReminderKey = (event.id, user_id, window.reminder_type)
        if key in self._sent:
            return False

        notification = await self._dispatcher.create(
            NotificationCreate(
                user_id=user_id,
                title=f"Reminder: {event.title}",
                message=f"{event.title} starts in {window.label} at {event.location}",
                type=NotificationType.reminder,
                link=f"/events/{event.id}",
                event_id=event.id,
                reminder_type=window.reminder_type,
            ),
            preference=window.preference,
        )
        if notification is None:
            return False
        self._sent.add(key)
        return True


__all__ = ["REMINDER_WINDOWS", "ReminderSweeper", "ReminderWindow"]
