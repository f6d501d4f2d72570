"""Lookups and permission checks shared by the group-scoped services."""

from __future__ import annotations

from collections.abc import Iterable

from campushub.core.exceptions import ForbiddenError, NotFoundError
from campushub.schemas.groups import Group, GroupRole
from campushub.schemas.users import UserPublic
from campushub.services.datastore import DataStore

GROUP_MANAGERS = frozenset({GroupRole.creator, GroupRole.admin})
GROUP_MODERATORS = frozenset({GroupRole.creator, GroupRole.admin, GroupRole.moderator})


async def load_group(store: DataStore, group_id: str) -> Group:
    group = await store.get_group(group_id)
    if group is None:
        raise NotFoundError("Group not found", details={"group_id": group_id})
    return group


def require_member(group: Group, user_id: str, message: str) -> None:
    if not group.is_member(user_id):
        raise ForbiddenError(message)


def has_group_role(group: Group, actor: UserPublic, roles: Iterable[GroupRole]) -> bool:
    """Group-scoped role check with platform admins as an override."""

    if actor.is_admin:
        return True
    return group.role_of(actor.id) in set(roles)
