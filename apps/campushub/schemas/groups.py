from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import Field

from campushub.core.utils import utcnow
from campushub.schemas.base import CamelModel
from campushub.schemas.users import Department, UserPublic


class GroupRole(str, Enum):
    """Per-group permission tier."""

    creator = "creator"
    admin = "admin"
    moderator = "moderator"
    member = "member"


class Group(CamelModel):
    id: str
    name: str
    description: str = ""
    category: str
    department: Department | None = None
    member_count: int = 0
    members: list[str] = Field(default_factory=list)
    member_roles: dict[str, GroupRole] = Field(default_factory=dict)
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    icon: str | None = None
    posts_count: int = 0
    messages_count: int = 0
    rules: str | None = None
    pinned_messages: list[str] = Field(default_factory=list)
    last_activity_at: datetime | None = None

    def is_member(self, user_id: str) -> bool:
        return user_id in self.members

    def role_of(self, user_id: str) -> GroupRole | None:
        return self.member_roles.get(user_id)


class GroupCreate(CamelModel):
    name: str = Field(min_length=3)
    description: str = ""
    category: str = Field(min_length=1)
    department: Department | None = None
    icon: str | None = None
    rules: str | None = None


class GroupRulesUpdate(CamelModel):
    rules: str


class MemberRoleUpdate(CamelModel):
    # "creator" is never assignable.
    role: Literal["admin", "moderator", "member"]


class GroupMember(UserPublic):
    group_role: GroupRole = GroupRole.member


class MembershipResult(CamelModel):
    group: Group
    user: UserPublic


class GroupPost(CamelModel):
    id: str
    group_id: str
    author_id: str
    author_name: str
    author_avatar: str | None = None
    content: str
    created_at: datetime = Field(default_factory=utcnow)
    likes: int = 0
    liked_by: list[str] = Field(default_factory=list)


class GroupPostCreate(CamelModel):
    content: str = Field(min_length=1)


class PostPage(CamelModel):
    posts: list[GroupPost]
    total: int
    has_more: bool
