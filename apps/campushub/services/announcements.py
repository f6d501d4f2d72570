from __future__ import annotations

from campushub.core.exceptions import NotFoundError
from campushub.core.utils import new_id
from campushub.schemas.announcements import Announcement, AnnouncementCreate, Priority
from campushub.schemas.notifications import NotificationType
from campushub.schemas.realtime import OutboundEventType, PushEvent
from campushub.schemas.users import UserPublic
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter
from campushub.services.notifications import NotificationDispatcher

_TITLE_PREFIX = {
    Priority.urgent: "Urgent ",
    Priority.important: "Important ",
    Priority.normal: "",
}


def notification_title(priority: Priority) -> str:
    return f"New {_TITLE_PREFIX[priority]}Announcement"


class AnnouncementService:
    def __init__(
        self,
        store: DataStore,
        router: FanoutRouter,
        notifications: NotificationDispatcher,
    ) -> None:
        self._store = store
        self._router = router
        self._notifications = notifications

    async def list_announcements(self) -> list[Announcement]:
        return await self._store.list_announcements()

    async def create_announcement(
        self, actor: UserPublic, payload: AnnouncementCreate
    ) -> Announcement:
        announcement = Announcement(
            id=new_id(),
            title=payload.title,
            description=payload.description,
            priority=payload.priority,
            created_by=actor.id,
            author_name=actor.full_name,
        )
        await self._store.save_announcement(announcement)

        students = await self._store.list_students()
        await self._notifications.notify_many(
            [student.id for student in students],
            title=notification_title(announcement.priority),
            message=announcement.title,
            type=NotificationType.announcement,
            link="/announcements",
        )
        self._router.to_all(
            PushEvent(type=OutboundEventType.announcement_created, data=announcement)
        )
        return announcement

    async def delete_announcement(self, announcement_id: str) -> None:
        if not await self._store.delete_announcement(announcement_id):
            raise NotFoundError("Announcement not found")


__all__ = ["AnnouncementService", "notification_title"]
