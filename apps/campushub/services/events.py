"""Campus events and registrations."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from campushub.core.exceptions import NotFoundError, ValidationFailedError
from campushub.core.utils import new_id, utcnow
from campushub.schemas.events import Event, EventCreate
from campushub.schemas.notifications import NotificationCreate, NotificationType, PreferenceKey
from campushub.schemas.realtime import OutboundEventType, PushEvent
from campushub.schemas.users import UserPublic
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter
from campushub.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


def _display_date(event: Event) -> str:
    return event.date.strftime("%b %d, %Y")


class EventService:
    def __init__(
        self,
        store: DataStore,
        router: FanoutRouter,
        notifications: NotificationDispatcher,
    ) -> None:
        self._store = store
        self._router = router
        self._notifications = notifications

    async def list_events(self) -> list[Event]:
        return await self._store.list_events()

    async def get_event(self, event_id: str) -> Event:
        event = await self._store.get_event(event_id)
        if event is None:
            raise NotFoundError("Event not found", details={"event_id": event_id})
        return event

    async def create_event(self, actor: UserPublic, payload: EventCreate) -> Event:
        event = Event(id=new_id(), created_by=actor.id, **payload.model_dump(by_alias=False))
        await self._store.save_event(event)

        students = await self._store.list_students()
        await self._notifications.notify_many(
            [student.id for student in students],
            title="New Event Added",
            message=f"{event.title} on {_display_date(event)}",
            type=NotificationType.event,
            link="/events",
        )
        self._router.to_all(PushEvent(type=OutboundEventType.event_created, data=event))
        return event

    async def list_by_category(self, category: str) -> list[Event]:
        return [e for e in await self._store.list_events() if e.category == category]

    async def list_upcoming(self, days: int, *, now: datetime | None = None) -> list[Event]:
        """Non-cancelled events starting within the next `days` days."""

        start = now or utcnow()
        end = start + timedelta(days=days)
        return [
            e for e in await self._store.list_events() if not e.cancelled and start <= e.date <= end
        ]

    async def list_saved(self, actor: UserPublic) -> list[Event]:
        return await self._store.list_saved_events(actor.id)

    async def save_event(self, event_id: str, actor: UserPublic) -> bool:
        await self.get_event(event_id)
        return await self._store.add_saved_event(actor.id, event_id)

    async def unsave_event(self, event_id: str, actor: UserPublic) -> bool:
        return await self._store.remove_saved_event(actor.id, event_id)

    async def delete_event(self, event_id: str) -> None:
        if not await self._store.delete_event(event_id):
            raise NotFoundError("Event not found", details={"event_id": event_id})

    async def register(self, event_id: str, actor: UserPublic) -> Event:
        event = await self.get_event(event_id)
        if actor.id in await self._store.list_registrations(event_id):
            return event
        if event.cancelled or event.is_full:
            raise ValidationFailedError("Cannot register for event")

        event.current_participants = await self._store.add_registration(event_id, actor.id)
        await self._store.save_event(event)

        await self._notifications.create(
            NotificationCreate(
                user_id=actor.id,
                title="Registration Confirmed",
                message=f"You've successfully registered for {event.title} on {_display_date(event)}",
                type=NotificationType.event,
                link=f"/events/{event.id}",
                event_id=event.id,
            ),
            preference=PreferenceKey.event_registration,
        )
        self._router.to_all(PushEvent(type=OutboundEventType.event_registration_update, data=event))
        return event

    async def unregister(self, event_id: str, actor: UserPublic) -> Event:
        event = await self.get_event(event_id)
        event.current_participants = await self._store.remove_registration(event_id, actor.id)
        await self._store.save_event(event)
        self._router.to_all(PushEvent(type=OutboundEventType.event_registration_update, data=event))
        return event


__all__ = ["EventService"]
