"""Group chat messages and posts.

Every mutation follows the same order: load and check permissions (raising
before anything changes), write to the datastore, then route the push event to
the group's members. Likes and reactions are toggles, so repeating a call undoes
it.
"""

from __future__ import annotations

import logging

from campushub.core.exceptions import ForbiddenError, NotFoundError, ValidationFailedError
from campushub.core.utils import new_id, truncate, utcnow
from campushub.schemas.groups import Group, GroupPost, GroupPostCreate, PostPage
from campushub.schemas.messages import Message, MessageCreate, MessagePage, MessageRef, MessageType
from campushub.schemas.notifications import NotificationType
from campushub.schemas.realtime import OutboundEventType, PostRef, PushEvent
from campushub.schemas.users import UserPublic
from campushub.services.access import (
    GROUP_MANAGERS,
    GROUP_MODERATORS,
    has_group_role,
    load_group,
    require_member,
)
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter
from campushub.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_CHARS = 50


def _toggle(user_ids: list[str], user_id: str) -> None:
    if user_id in user_ids:
        user_ids.remove(user_id)
    else:
        user_ids.append(user_id)


def _matches(query: str, *fields: str) -> bool:
    needle = query.strip().lower()
    return any(needle in value.lower() for value in fields)


class GroupMessagingService:
    def __init__(
        self,
        store: DataStore,
        router: FanoutRouter,
        notifications: NotificationDispatcher,
        *,
        notify_on_messages: bool = False,
    ) -> None:
        self._store = store
        self._router = router
        self._notifications = notifications
        self._notify_on_messages = notify_on_messages

    # --- Messages ---

    async def list_messages(
        self,
        group_id: str,
        actor: UserPublic,
        *,
        page: int = 1,
        limit: int = 50,
        search: str | None = None,
    ) -> MessagePage:
        """Page 1 is the newest `limit` messages, oldest first within the page."""

        group = await load_group(self._store, group_id)
        require_member(group, actor.id, "You must be a member to view messages")
        messages = await self._store.list_messages(group_id)

        if search:
            found = [m for m in messages if _matches(search, m.content, m.author_name)]
            return MessagePage(messages=found, total=len(found), has_more=False)

        total = len(messages)
        end = max(0, total - (page - 1) * limit)
        start = max(0, total - page * limit)
        return MessagePage(messages=messages[start:end], total=total, has_more=start > 0)

    async def create_message(
        self, group_id: str, actor: UserPublic, payload: MessageCreate
    ) -> Message:
        group = await load_group(self._store, group_id)
        require_member(group, actor.id, "You must be a member to send messages")
        if payload.type == MessageType.text and not payload.content.strip():
            raise ValidationFailedError("Message content is required")
        if payload.type != MessageType.text and not payload.file_url:
            raise ValidationFailedError("fileUrl is required for image and file messages")
        if payload.reply_to:
            replied = await self._store.get_message(payload.reply_to)
            if replied is None or replied.group_id != group_id:
                raise NotFoundError(
                    "Replied-to message not found", details={"reply_to": payload.reply_to}
                )

        message = Message(
            id=new_id(),
            group_id=group_id,
            author_id=actor.id,
            author_name=actor.full_name,
            author_avatar=actor.avatar,
            content=payload.content,
            type=payload.type,
            file_url=payload.file_url,
            file_name=payload.file_name,
            reply_to=payload.reply_to,
        )
        await self._store.save_message(message)

        group.messages_count += 1
        group.last_activity_at = message.created_at
        await self._store.save_group(group)

        self._broadcast(group, OutboundEventType.message_created, message)

        if self._notify_on_messages:
            await self._notifications.notify_many(
                self._others(group, actor.id),
                title=f"New message in {group.name}",
                message=f"{actor.full_name}: {truncate(message.content, MESSAGE_PREVIEW_CHARS)}",
                type=NotificationType.message,
                link=f"/groups/{group.id}",
            )
        return message

    async def edit_message(self, message_id: str, actor: UserPublic, content: str) -> Message:
        content = content.strip()
        if not content:
            raise ValidationFailedError("Message content is required")

        message, group = await self._load_message(message_id)
        if message.author_id != actor.id and not has_group_role(group, actor, GROUP_MANAGERS):
            raise ForbiddenError("You don't have permission to edit this message")

        message.content = content
        message.edited_at = utcnow()
        await self._store.save_message(message)
        self._broadcast(group, OutboundEventType.message_edited, message)
        return message

    async def delete_message(self, message_id: str, actor: UserPublic) -> MessageRef:
        message, group = await self._load_message(message_id)
        if message.author_id != actor.id and not has_group_role(group, actor, GROUP_MODERATORS):
            raise ForbiddenError("You don't have permission to delete this message")

        await self._store.delete_message(message_id)
        if message_id in group.pinned_messages:
            group.pinned_messages.remove(message_id)
        group.messages_count = max(0, group.messages_count - 1)
        await self._store.save_group(group)

        ref = MessageRef(message_id=message_id, group_id=group.id)
        self._broadcast(group, OutboundEventType.message_deleted, ref)
        return ref

    async def like_message(self, message_id: str, actor: UserPublic) -> Message:
        message, group = await self._load_message(message_id)
        require_member(group, actor.id, "You must be a member to like messages")

        _toggle(message.liked_by, actor.id)
        message.likes = len(message.liked_by)
        await self._store.save_message(message)
        self._broadcast(group, OutboundEventType.message_liked, message)
        return message

    async def react_message(self, message_id: str, actor: UserPublic, emoji: str) -> Message:
        emoji = emoji.strip()
        if not emoji:
            raise ValidationFailedError("Emoji is required")

        message, group = await self._load_message(message_id)
        require_member(group, actor.id, "You must be a member to react to messages")

        reactors = message.reactions.setdefault(emoji, [])
        _toggle(reactors, actor.id)
        if not reactors:
            del message.reactions[emoji]
        await self._store.save_message(message)
        self._broadcast(group, OutboundEventType.message_reacted, message)
        return message

    async def pin_message(self, message_id: str, actor: UserPublic) -> Message:
        return await self._set_pinned(message_id, actor, pinned=True)

    async def unpin_message(self, message_id: str, actor: UserPublic) -> Message:
        return await self._set_pinned(message_id, actor, pinned=False)

    async def _set_pinned(self, message_id: str, actor: UserPublic, *, pinned: bool) -> Message:
        message, group = await self._load_message(message_id)
        if not has_group_role(group, actor, GROUP_MANAGERS):
            verb = "pin" if pinned else "unpin"
            raise ForbiddenError(f"Only group admins can {verb} messages")

        # isPinned and the group's pinned list are written together.
        message.is_pinned = pinned
        if pinned and message_id not in group.pinned_messages:
            group.pinned_messages.append(message_id)
        elif not pinned and message_id in group.pinned_messages:
            group.pinned_messages.remove(message_id)
        await self._store.save_message(message)
        await self._store.save_group(group)

        event_type = OutboundEventType.message_pinned if pinned else OutboundEventType.message_unpinned
        self._broadcast(group, event_type, message)
        return message

    # --- Posts ---

    async def list_posts(
        self,
        group_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
    ) -> PostPage:
        """Newest first."""

        await load_group(self._store, group_id)
        posts = await self._store.list_posts(group_id)

        if search:
            found = [p for p in posts if _matches(search, p.content, p.author_name)]
            return PostPage(posts=found, total=len(found), has_more=False)

        start = (page - 1) * limit
        return PostPage(
            posts=posts[start : start + limit],
            total=len(posts),
            has_more=start + limit < len(posts),
        )

    async def create_post(
        self, group_id: str, actor: UserPublic, payload: GroupPostCreate
    ) -> GroupPost:
        group = await load_group(self._store, group_id)
        require_member(group, actor.id, "You must be a member to post in this group")

        post = GroupPost(
            id=new_id(),
            group_id=group_id,
            author_id=actor.id,
            author_name=actor.full_name,
            author_avatar=actor.avatar,
            content=payload.content,
        )
        await self._store.save_post(post)

        group.posts_count += 1
        group.last_activity_at = post.created_at
        await self._store.save_group(group)

        self._broadcast(group, OutboundEventType.group_post_created, post)
        await self._notifications.notify_many(
            self._others(group, actor.id),
            title="New Post in Group",
            message=f"{actor.full_name} posted in {group.name}",
            type=NotificationType.group,
            link=f"/groups/{group.id}",
        )
        return post

    async def delete_post(self, group_id: str, post_id: str, actor: UserPublic) -> PostRef:
        group = await load_group(self._store, group_id)
        post = await self._load_post(group_id, post_id)

        allowed = (
            post.author_id == actor.id
            or group.created_by == actor.id
            or has_group_role(group, actor, GROUP_MANAGERS)
        )
        if not allowed:
            raise ForbiddenError("You don't have permission to delete this post")

        await self._store.delete_post(post_id)
        group.posts_count = max(0, group.posts_count - 1)
        await self._store.save_group(group)

        ref = PostRef(post_id=post_id, group_id=group_id)
        self._broadcast(group, OutboundEventType.group_post_deleted, ref)
        return ref

    async def like_post(self, group_id: str, post_id: str, actor: UserPublic) -> GroupPost:
        group = await load_group(self._store, group_id)
        post = await self._load_post(group_id, post_id)
        require_member(group, actor.id, "You must be a member to like posts")

        _toggle(post.liked_by, actor.id)
        post.likes = len(post.liked_by)
        await self._store.save_post(post)
        self._broadcast(group, OutboundEventType.group_post_liked, post)
        return post

    # --- helpers ---

    async def _load_message(self, message_id: str) -> tuple[Message, Group]:
        message = await self._store.get_message(message_id)
        if message is None:
            raise NotFoundError("Message not found", details={"message_id": message_id})
        group = await load_group(self._store, message.group_id)
        return message, group

    async def _load_post(self, group_id: str, post_id: str) -> GroupPost:
        post = await self._store.get_post(post_id)
        if post is None or post.group_id != group_id:
            raise NotFoundError("Post not found", details={"post_id": post_id})
        return post

    @staticmethod
    def _others(group: Group, user_id: str) -> list[str]:
        return [member_id for member_id in group.members if member_id != user_id]

    def _broadcast(self, group: Group, event_type: OutboundEventType, data: object) -> None:
        self._router.to_group(group.id, PushEvent(type=event_type, data=data), group.members)


__all__ = ["GroupMessagingService"]
