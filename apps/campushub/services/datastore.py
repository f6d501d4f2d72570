"""Keyed entity store consumed by the chat and notification core.

`DataStore` is the contract; `InMemoryDataStore` is the process-lifetime
implementation used by the app. Every method is a coroutine so a persistent
backend can suspend, and lookups return `None` (or an empty list) instead of
raising when an id is unknown.

Reads hand out copies. Callers mutate the copy and `save_*` it back, which keeps
each read-modify-write explicit.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Protocol, TypeVar

from pydantic import BaseModel

from campushub.schemas.announcements import Announcement
from campushub.schemas.events import Event
from campushub.schemas.groups import Group, GroupPost
from campushub.schemas.messages import Message
from campushub.schemas.notifications import Notification
from campushub.schemas.users import User, UserRole

ModelT = TypeVar("ModelT", bound=BaseModel)


class DataStore(Protocol):
    # Users
    async def get_user(self, user_id: str) -> User | None: ...
    async def get_user_by_email(self, email: str) -> User | None: ...
    async def list_users(self) -> list[User]: ...
    async def list_students(self) -> list[User]: ...
    async def save_user(self, user: User) -> User: ...
    async def delete_user(self, user_id: str) -> bool: ...

    # Groups
    async def get_group(self, group_id: str) -> Group | None: ...
    async def list_groups(self) -> list[Group]: ...
    async def save_group(self, group: Group) -> Group: ...
    async def delete_group(self, group_id: str) -> bool: ...

    # Group posts
    async def get_post(self, post_id: str) -> GroupPost | None: ...
    async def list_posts(self, group_id: str) -> list[GroupPost]: ...
    async def save_post(self, post: GroupPost) -> GroupPost: ...
    async def delete_post(self, post_id: str) -> bool: ...

    # Messages
    async def get_message(self, message_id: str) -> Message | None: ...
    async def list_messages(self, group_id: str) -> list[Message]: ...
    async def save_message(self, message: Message) -> Message: ...
    async def delete_message(self, message_id: str) -> bool: ...

    # Events
    async def get_event(self, event_id: str) -> Event | None: ...
    async def list_events(self) -> list[Event]: ...
    async def save_event(self, event: Event) -> Event: ...
    async def delete_event(self, event_id: str) -> bool: ...
    async def list_registrations(self, event_id: str) -> list[str]: ...
    async def add_registration(self, event_id: str, user_id: str) -> int: ...
    async def remove_registration(self, event_id: str, user_id: str) -> int: ...
    async def list_saved_events(self, user_id: str) -> list[Event]: ...
    async def add_saved_event(self, user_id: str, event_id: str) -> bool: ...
    async def remove_saved_event(self, user_id: str, event_id: str) -> bool: ...

    # Announcements
    async def get_announcement(self, announcement_id: str) -> Announcement | None: ...
    async def list_announcements(self) -> list[Announcement]: ...
    async def save_announcement(self, announcement: Announcement) -> Announcement: ...
    async def delete_announcement(self, announcement_id: str) -> bool: ...

    # Notifications
    async def get_notification(self, notification_id: str) -> Notification | None: ...
    async def list_notifications(self, user_id: str) -> list[Notification]: ...
    async def save_notification(self, notification: Notification) -> Notification: ...


def _copy(model: ModelT | None) -> ModelT | None:
    return model.model_copy(deep=True) if model is not None else None


def _newest_first(items: list[ModelT]) -> list[ModelT]:
    # Insertion order breaks ties between equal timestamps.
    ordered = sorted(
        enumerate(items),
        key=lambda pair: (pair[1].created_at, pair[0]),  # type: ignore[attr-defined]
        reverse=True,
    )
    return [item.model_copy(deep=True) for _, item in ordered]


class InMemoryDataStore:
    """Dict-backed `DataStore`. Contents live for the lifetime of the process."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._groups: dict[str, Group] = {}
        self._posts: dict[str, GroupPost] = {}
        self._messages: dict[str, Message] = {}
        self._events: dict[str, Event] = {}
        self._registrations: dict[str, set[str]] = defaultdict(set)
        self._saved_events: dict[str, set[str]] = defaultdict(set)
        self._announcements: dict[str, Announcement] = {}
        self._notifications: dict[str, Notification] = {}

    # --- Users ---

    async def get_user(self, user_id: str) -> User | None:
        return _copy(self._users.get(user_id))

    async def get_user_by_email(self, email: str) -> User | None:
        needle = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == needle:
                return _copy(user)
        return None

    async def list_users(self) -> list[User]:
        return [user.model_copy(deep=True) for user in self._users.values()]

    async def list_students(self) -> list[User]:
        return [
            user.model_copy(deep=True)
            for user in self._users.values()
            if user.role == UserRole.student
        ]

    async def save_user(self, user: User) -> User:
        self._users[user.id] = user.model_copy(deep=True)
        return user

    async def delete_user(self, user_id: str) -> bool:
        """Remove the user with their notifications and saved events.

        Group membership and event registrations are left to the caller, which
        keeps the counters in step and broadcasts the change.
        """
        if self._users.pop(user_id, None) is None:
            return False
        self._saved_events.pop(user_id, None)
        for notification_id in [n.id for n in self._notifications.values() if n.user_id == user_id]:
            del self._notifications[notification_id]
        return True

    # --- Groups ---

    async def get_group(self, group_id: str) -> Group | None:
        return _copy(self._groups.get(group_id))

    async def list_groups(self) -> list[Group]:
        return [group.model_copy(deep=True) for group in self._groups.values()]

    async def save_group(self, group: Group) -> Group:
        self._groups[group.id] = group.model_copy(deep=True)
        return group

    async def delete_group(self, group_id: str) -> bool:
        if self._groups.pop(group_id, None) is None:
            return False
        for post_id in [p.id for p in self._posts.values() if p.group_id == group_id]:
            del self._posts[post_id]
        for message_id in [m.id for m in self._messages.values() if m.group_id == group_id]:
            del self._messages[message_id]
        for user in self._users.values():
            if group_id in user.joined_groups:
                user.joined_groups.remove(group_id)
        return True

    # --- Group posts ---

    async def get_post(self, post_id: str) -> GroupPost | None:
        return _copy(self._posts.get(post_id))

    async def list_posts(self, group_id: str) -> list[GroupPost]:
        return _newest_first([p for p in self._posts.values() if p.group_id == group_id])

    async def save_post(self, post: GroupPost) -> GroupPost:
        self._posts[post.id] = post.model_copy(deep=True)
        return post

    async def delete_post(self, post_id: str) -> bool:
        return self._posts.pop(post_id, None) is not None

    # --- Messages ---

    async def get_message(self, message_id: str) -> Message | None:
        return _copy(self._messages.get(message_id))

    async def list_messages(self, group_id: str) -> list[Message]:
        # dicts keep insertion order; the stable sort keeps it for equal timestamps.
        messages = [m for m in self._messages.values() if m.group_id == group_id]
        messages.sort(key=lambda m: m.created_at)
        return [m.model_copy(deep=True) for m in messages]

    async def save_message(self, message: Message) -> Message:
        self._messages[message.id] = message.model_copy(deep=True)
        return message

    async def delete_message(self, message_id: str) -> bool:
        return self._messages.pop(message_id, None) is not None

    # --- Events ---

    async def get_event(self, event_id: str) -> Event | None:
        return _copy(self._events.get(event_id))

    async def list_events(self) -> list[Event]:
        events = sorted(self._events.values(), key=lambda e: e.date)
        return [e.model_copy(deep=True) for e in events]

    async def save_event(self, event: Event) -> Event:
        self._events[event.id] = event.model_copy(deep=True)
        return event

    async def delete_event(self, event_id: str) -> bool:
        self._registrations.pop(event_id, None)
        for saved in self._saved_events.values():
            saved.discard(event_id)
        return self._events.pop(event_id, None) is not None

    async def list_registrations(self, event_id: str) -> list[str]:
        return sorted(self._registrations.get(event_id, ()))

    async def add_registration(self, event_id: str, user_id: str) -> int:
        registrations = self._registrations[event_id]
        registrations.add(user_id)
        return len(registrations)

    async def remove_registration(self, event_id: str, user_id: str) -> int:
        registrations = self._registrations.get(event_id)
        if registrations is None:
            return 0
        registrations.discard(user_id)
        return len(registrations)

    async def list_saved_events(self, user_id: str) -> list[Event]:
        saved = self._saved_events.get(user_id, set())
        events = sorted(
            (self._events[eid] for eid in saved if eid in self._events), key=lambda e: e.date
        )
        return [e.model_copy(deep=True) for e in events]

    async def add_saved_event(self, user_id: str, event_id: str) -> bool:
        saved = self._saved_events[user_id]
        if event_id in saved:
            return False
        saved.add(event_id)
        return True

    async def remove_saved_event(self, user_id: str, event_id: str) -> bool:
        saved = self._saved_events.get(user_id)
        if not saved or event_id not in saved:
            return False
        saved.discard(event_id)
        return True

    # --- Announcements ---

    async def get_announcement(self, announcement_id: str) -> Announcement | None:
        return _copy(self._announcements.get(announcement_id))

    async def list_announcements(self) -> list[Announcement]:
        return _newest_first(list(self._announcements.values()))

    async def save_announcement(self, announcement: Announcement) -> Announcement:
        self._announcements[announcement.id] = announcement.model_copy(deep=True)
        return announcement

    async def delete_announcement(self, announcement_id: str) -> bool:
        return self._announcements.pop(announcement_id, None) is not None

    # --- Notifications ---

    async def get_notification(self, notification_id: str) -> Notification | None:
        return _copy(self._notifications.get(notification_id))

    async def list_notifications(self, user_id: str) -> list[Notification]:
        return _newest_first([n for n in self._notifications.values() if n.user_id == user_id])

    async def save_notification(self, notification: Notification) -> Notification:
        self._notifications[notification.id] = notification.model_copy(deep=True)
        return notification


__all__ = ["DataStore", "InMemoryDataStore"]
