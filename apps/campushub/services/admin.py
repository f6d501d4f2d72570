"""Platform administration and dashboard counters.

Deleting an account keeps the rest of the store consistent: the user leaves
every group they belong to, their event registrations are dropped with the
participant counts updated, and a live session is closed. Accounts that
created a group cannot be deleted, since every group keeps exactly one creator.
"""

from __future__ import annotations

import logging
from datetime import datetime

from campushub.core.exceptions import NotFoundError, ValidationFailedError
from campushub.core.utils import utcnow
from campushub.schemas.admin import AdminStats, AdminUserUpdate, DashboardStats
from campushub.schemas.events import Event
from campushub.schemas.groups import Group, GroupRole
from campushub.schemas.realtime import MemberLeft, OutboundEventType, PushEvent
from campushub.schemas.users import User, UserPublic
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter
from campushub.services.session_registry import SessionRegistry
from campushub.services.typing_tracker import TypingTracker

logger = logging.getLogger(__name__)

ACCOUNT_DELETED_CLOSE_CODE = 4001


def _is_upcoming(event: Event, now: datetime) -> bool:
    return not event.cancelled and event.date >= now


class AdminService:
    def __init__(
        self,
        store: DataStore,
        router: FanoutRouter,
        sessions: SessionRegistry,
        typing: TypingTracker,
    ) -> None:
        self._store = store
        self._router = router
        self._sessions = sessions
        self._typing = typing

    # --- Users ---

    async def list_users(self) -> list[UserPublic]:
        return [user.public() for user in await self._store.list_users()]

    async def list_students(self) -> list[UserPublic]:
        return [user.public() for user in await self._store.list_students()]

    async def update_user(self, user_id: str, payload: AdminUserUpdate) -> UserPublic:
        user = await self._load_user(user_id)
        for field, value in payload.model_dump(by_alias=False, exclude_none=True).items():
            setattr(user, field, value)
        await self._store.save_user(user)
        logger.info("User %s updated by an admin", user_id)
        return user.public()

    async def delete_user(self, actor: UserPublic, user_id: str) -> None:
        if user_id == actor.id:
            raise ValidationFailedError("Cannot delete your own account", code="self_delete")
        user = await self._load_user(user_id)

        groups = [g for g in await self._store.list_groups() if g.is_member(user_id)]
        owned = [g.id for g in groups if g.role_of(user_id) == GroupRole.creator]
        if owned:
            raise ValidationFailedError(
                "Delete the groups this user created first",
                code="user_owns_groups",
                details={"group_ids": owned},
            )

        for group in groups:
            await self._remove_member(group, user_id)
        for event in await self._store.list_events():
            if user_id in await self._store.list_registrations(event.id):
                await self._drop_registration(event, user_id)

        await self._typing.clear_user(user_id)
        await self._store.delete_user(user_id)
        await self._close_session(user)
        logger.info("User %s deleted by %s", user_id, actor.id)

    # --- Groups ---

    async def list_groups(self) -> list[Group]:
        return await self._store.list_groups()

    # --- Stats ---

    async def dashboard_stats(self, user_id: str, *, now: datetime | None = None) -> DashboardStats:
        now = now or utcnow()
        return DashboardStats(
            total_announcements=len(await self._store.list_announcements()),
            total_groups=len(await self._store.list_groups()),
            upcoming_events=sum(_is_upcoming(e, now) for e in await self._store.list_events()),
            unread_notifications=await self._unread(user_id),
        )

    async def admin_stats(self, user_id: str, *, now: datetime | None = None) -> AdminStats:
        dashboard = await self.dashboard_stats(user_id, now=now)
        return AdminStats(
            **dashboard.model_dump(by_alias=False),
            total_users=len(await self._store.list_users()),
            total_events=len(await self._store.list_events()),
        )

    # --- helpers ---

    async def _load_user(self, user_id: str) -> User:
        user = await self._store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})
        return user

    async def _unread(self, user_id: str) -> int:
        return sum(not n.read for n in await self._store.list_notifications(user_id))

    async def _remove_member(self, group: Group, user_id: str) -> None:
        group.members.remove(user_id)
        group.member_roles.pop(user_id, None)
        group.member_count = len(group.members)
        await self._store.save_group(group)
        self._router.to_group(
            group.id,
            PushEvent(
                type=OutboundEventType.member_left,
                data=MemberLeft(group_id=group.id, user_id=user_id),
            ),
            group.members,
        )

    async def _drop_registration(self, event: Event, user_id: str) -> None:
        event.current_participants = await self._store.remove_registration(event.id, user_id)
        await self._store.save_event(event)
        self._router.to_all(PushEvent(type=OutboundEventType.event_registration_update, data=event))

    async def _close_session(self, user: User) -> None:
        session = self._sessions.get(user.id)
        if session is None:
            return
        self._sessions.unregister(user.id, session.connection)
        await session.connection.close(code=ACCOUNT_DELETED_CLOSE_CODE, reason="Account deleted")


__all__ = ["ACCOUNT_DELETED_CLOSE_CODE", "AdminService"]
