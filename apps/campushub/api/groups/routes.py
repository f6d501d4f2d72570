from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from campushub.api.dependencies import get_current_user, require_admin
from campushub.core.dependencies import get_group_service, get_messaging_service
from campushub.schemas.groups import (
    Group,
    GroupCreate,
    GroupMember,
    GroupPost,
    GroupPostCreate,
    GroupRole,
    GroupRulesUpdate,
    MemberRoleUpdate,
    MembershipResult,
    PostPage,
)
from campushub.schemas.messages import Message, MessageCreate, MessagePage
from campushub.schemas.users import UserPublic
from campushub.services.groups import GroupService
from campushub.services.messaging import GroupMessagingService

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.get("", response_model=list[Group])
async def list_groups(
    _user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> list[Group]:
    return await groups.list_groups()


@router.post("", response_model=Group, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate,
    admin: UserPublic = Depends(require_admin),
    groups: GroupService = Depends(get_group_service),
) -> Group:
    return await groups.create_group(admin, payload)


@router.get("/{group_id}", response_model=Group)
async def get_group(
    group_id: str,
    _user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> Group:
    return await groups.get_group(group_id)


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    _admin: UserPublic = Depends(require_admin),
    groups: GroupService = Depends(get_group_service),
) -> dict[str, str]:
    await groups.delete_group(group_id)
    return {"message": "Group deleted successfully"}


@router.patch("/{group_id}/rules", response_model=Group)
async def update_rules(
    group_id: str,
    payload: GroupRulesUpdate,
    user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> Group:
    return await groups.update_rules(group_id, user, payload.rules)


@router.get("/{group_id}/members", response_model=list[GroupMember])
async def list_members(
    group_id: str,
    _user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> list[GroupMember]:
    return await groups.list_members(group_id)


@router.patch("/{group_id}/members/{member_id}/role", response_model=Group)
async def set_member_role(
    group_id: str,
    member_id: str,
    payload: MemberRoleUpdate,
    user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> Group:
    return await groups.set_member_role(group_id, member_id, user, GroupRole(payload.role))


@router.post("/{group_id}/join", response_model=MembershipResult)
async def join_group(
    group_id: str,
    user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> MembershipResult:
    return await groups.join(group_id, user)


@router.post("/{group_id}/leave", response_model=MembershipResult)
async def leave_group(
    group_id: str,
    user: UserPublic = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service),
) -> MembershipResult:
    return await groups.leave(group_id, user)


# --- Posts ---


@router.get("/{group_id}/posts", response_model=PostPage)
async def list_posts(
    group_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = None,
    _user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> PostPage:
    return await messaging.list_posts(group_id, page=page, limit=limit, search=search)


@router.post("/{group_id}/posts", response_model=GroupPost, status_code=status.HTTP_201_CREATED)
async def create_post(
    group_id: str,
    payload: GroupPostCreate,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> GroupPost:
    return await messaging.create_post(group_id, user, payload)


@router.delete("/{group_id}/posts/{post_id}")
async def delete_post(
    group_id: str,
    post_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> dict[str, str]:
    await messaging.delete_post(group_id, post_id, user)
    return {"message": "Post deleted successfully"}


@router.post("/{group_id}/posts/{post_id}/like", response_model=GroupPost)
async def like_post(
    group_id: str,
    post_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> GroupPost:
    return await messaging.like_post(group_id, post_id, user)


# --- Messages ---


@router.get("/{group_id}/messages", response_model=MessagePage)
async def list_messages(
    group_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    search: str | None = None,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> MessagePage:
    return await messaging.list_messages(group_id, user, page=page, limit=limit, search=search)


@router.post("/{group_id}/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
async def create_message(
    group_id: str,
    payload: MessageCreate,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.create_message(group_id, user, payload)
