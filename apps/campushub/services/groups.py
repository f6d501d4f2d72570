"""Group lifecycle and membership.

`member_roles` keys always stay a subset of `members`, and the creator entry is
never removed by a leave. `User.joined_groups` is updated alongside membership.
"""

from __future__ import annotations

import logging

from campushub.core.exceptions import ForbiddenError, NotFoundError
from campushub.core.utils import new_id
from campushub.schemas.groups import (
    Group,
    GroupCreate,
    GroupMember,
    GroupRole,
    MembershipResult,
)
from campushub.schemas.realtime import (
    GroupRef,
    MemberJoined,
    MemberLeft,
    MemberRoleChanged,
    OutboundEventType,
    PushEvent,
)
from campushub.schemas.users import User, UserPublic
from campushub.services.access import GROUP_MANAGERS, has_group_role, load_group
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter
from campushub.services.typing_tracker import TypingTracker

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, store: DataStore, router: FanoutRouter, typing: TypingTracker) -> None:
        self._store = store
        self._router = router
        self._typing = typing

    async def list_groups(self) -> list[Group]:
        groups = await self._store.list_groups()
        return sorted(groups, key=lambda g: g.member_count, reverse=True)

    async def get_group(self, group_id: str) -> Group:
        return await load_group(self._store, group_id)

    async def create_group(self, actor: UserPublic, payload: GroupCreate) -> Group:
        user = await self._load_user(actor.id)
        group = Group(
            id=new_id(),
            **payload.model_dump(by_alias=False),
            members=[actor.id],
            member_roles={actor.id: GroupRole.creator},
            member_count=1,
            created_by=actor.id,
        )
        await self._store.save_group(group)

        user.joined_groups.append(group.id)
        await self._store.save_user(user)

        logger.info("Group %s created by %s", group.id, actor.id)
        self._router.to_all(PushEvent(type=OutboundEventType.group_created, data=group))
        return group

    async def delete_group(self, group_id: str) -> None:
        if not await self._store.delete_group(group_id):
            raise NotFoundError("Group not found", details={"group_id": group_id})
        self._typing.clear_group(group_id)
        self._router.to_all(PushEvent(type=OutboundEventType.group_deleted, data=GroupRef(id=group_id)))

    async def join(self, group_id: str, actor: UserPublic) -> MembershipResult:
        group = await load_group(self._store, group_id)
        user = await self._load_user(actor.id)
        if group.is_member(actor.id):
            return MembershipResult(group=group, user=user.public())

        group.members.append(actor.id)
        group.member_roles[actor.id] = GroupRole.member
        group.member_count = len(group.members)
        await self._store.save_group(group)

        if group_id not in user.joined_groups:
            user.joined_groups.append(group_id)
        await self._store.save_user(user)

        public = user.public()
        self._router.to_group(
            group_id,
            PushEvent(
                type=OutboundEventType.member_joined,
                data=MemberJoined(group_id=group_id, user=public),
            ),
            group.members,
        )
        return MembershipResult(group=group, user=public)

    async def leave(self, group_id: str, actor: UserPublic) -> MembershipResult:
        group = await load_group(self._store, group_id)
        user = await self._load_user(actor.id)
        if group.role_of(actor.id) == GroupRole.creator:
            raise ForbiddenError("The group creator cannot leave the group")
        if not group.is_member(actor.id):
            return MembershipResult(group=group, user=user.public())

        group.members.remove(actor.id)
        group.member_roles.pop(actor.id, None)
        group.member_count = len(group.members)
        await self._store.save_group(group)

        if group_id in user.joined_groups:
            user.joined_groups.remove(group_id)
        await self._store.save_user(user)

        self._router.to_group(
            group_id,
            PushEvent(
                type=OutboundEventType.member_left,
                data=MemberLeft(group_id=group_id, user_id=actor.id),
            ),
            [*group.members, actor.id],
        )
        return MembershipResult(group=group, user=user.public())

    async def list_members(self, group_id: str) -> list[GroupMember]:
        group = await load_group(self._store, group_id)
        members: list[GroupMember] = []
        for member_id in group.members:
            user = await self._store.get_user(member_id)
            if user is None:
                continue
            members.append(
                GroupMember(
                    **user.public().model_dump(by_alias=False),
                    group_role=group.role_of(member_id) or GroupRole.member,
                )
            )
        return members

    async def set_member_role(
        self, group_id: str, member_id: str, actor: UserPublic, role: GroupRole
    ) -> Group:
        group = await load_group(self._store, group_id)
        if group.role_of(actor.id) != GroupRole.creator and not actor.is_admin:
            raise ForbiddenError("Only the group creator can change member roles")
        if role == GroupRole.creator:
            raise ForbiddenError("The creator role cannot be assigned")
        if not group.is_member(member_id):
            raise NotFoundError("Member not found", details={"member_id": member_id})
        if group.role_of(member_id) == GroupRole.creator:
            raise ForbiddenError("The group creator's role cannot be changed")

        group.member_roles[member_id] = role
        await self._store.save_group(group)

        self._router.to_group(
            group_id,
            PushEvent(
                type=OutboundEventType.member_role_changed,
                data=MemberRoleChanged(group_id=group_id, member_id=member_id, role=role.value),
            ),
            group.members,
        )
        return group

    async def update_rules(self, group_id: str, actor: UserPublic, rules: str) -> Group:
        group = await load_group(self._store, group_id)
        if not has_group_role(group, actor, GROUP_MANAGERS):
            raise ForbiddenError("Only group admins can update group rules")
        group.rules = rules
        await self._store.save_group(group)
        return group

    async def _load_user(self, user_id: str) -> User:
        user = await self._store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})
        return user


__all__ = ["GroupService"]
