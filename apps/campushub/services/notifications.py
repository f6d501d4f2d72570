"""Durable notifications with best-effort live delivery.

Every notification is persisted first and then pushed to the user's session if
one is open; a missed push is recovered from the snapshot sent on reconnect.
Event-related categories honour the user's notification preferences: when the
matching flag is off the notification is not created at all.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from campushub.core.exceptions import NotFoundError
from campushub.core.utils import new_id
from campushub.schemas.notifications import (
    Notification,
    NotificationCreate,
    NotificationType,
    PreferenceKey,
)
from campushub.schemas.realtime import OutboundEventType, PushEvent
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, store: DataStore, router: FanoutRouter) -> None:
        self._store = store
        self._router = router

    async def create(
        self,
        payload: NotificationCreate,
        *,
        preference: PreferenceKey | None = None,
    ) -> Notification | None:
        """Persist and push a notification.

        Returns None when `preference` names a category the user has turned off,
        or when the user cannot be found to check it.
        """

        if preference is not None and not await self._allows(payload.user_id, preference):
            return None

        notification = Notification(id=new_id(), **payload.model_dump(by_alias=False))
        await self._store.save_notification(notification)
        self._router.to_user(
            notification.user_id,
            PushEvent(type=OutboundEventType.notification, data=notification),
        )
        return notification

    async def notify_many(
        self,
        user_ids: Iterable[str],
        *,
        title: str,
        message: str,
        type: NotificationType,
        link: str | None = None,
    ) -> list[Notification]:
        created: list[Notification] = []
        for user_id in user_ids:
            notification = await self.create(
                NotificationCreate(
                    user_id=user_id, title=title, message=message, type=type, link=link
                )
            )
            if notification is not None:
                created.append(notification)
        return created

    async def list_for_user(self, user_id: str) -> list[Notification]:
        return await self._store.list_notifications(user_id)

    async def snapshot(self, user_id: str) -> PushEvent:
        """The `notifications` frame sent when a session opens."""

        return PushEvent(
            type=OutboundEventType.notifications,
            data=await self.list_for_user(user_id),
        )

    async def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = await self._store.get_notification(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        if not notification.read:
            notification.read = True
            await self._store.save_notification(notification)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        updated = 0
        for notification in await self._store.list_notifications(user_id):
            if notification.read:
                continue
            notification.read = True
            await self._store.save_notification(notification)
            updated += 1
        return updated

    async def _allows(self, user_id: str, preference: PreferenceKey) -> bool:
        user = await self._store.get_user(user_id)
        if user is None:
            logger.warning("Skipping %s notification for unknown user %s", preference.value, user_id)
            return False
        enabled = bool(getattr(user.notification_preferences, preference.value))
        if not enabled:
            logger.debug("User %s has %s notifications turned off", user_id, preference.value)
        return enabled


__all__ = ["NotificationDispatcher"]
