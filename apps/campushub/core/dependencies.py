"""Central dependency providers (FastAPI + background tasks).

Each service is a process-scoped singleton. Clearing the caches (see
`clear_dependency_caches`) yields a fresh graph, which tests rely on.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from campushub.core.settings import settings

if TYPE_CHECKING:
    from campushub.services.admin import AdminService
    from campushub.services.accounts import AccountService
    from campushub.services.announcements import AnnouncementService
    from campushub.services.datastore import DataStore
    from campushub.services.events import EventService
    from campushub.services.fanout import FanoutRouter
    from campushub.services.groups import GroupService
    from campushub.services.messaging import GroupMessagingService
    from campushub.services.notifications import NotificationDispatcher
    from campushub.services.push_channel import PushChannel
    from campushub.services.reminders import ReminderSweeper
    from campushub.services.session_registry import SessionRegistry
    from campushub.services.typing_tracker import TypingTracker


@lru_cache(maxsize=1)
def get_datastore() -> DataStore:
    from campushub.services.datastore import InMemoryDataStore

    return InMemoryDataStore()


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    from campushub.services.session_registry import SessionRegistry

    return SessionRegistry()


@lru_cache(maxsize=1)
def get_fanout_router() -> FanoutRouter:
    from campushub.services.fanout import FanoutRouter

    return FanoutRouter(get_session_registry())


@lru_cache(maxsize=1)
def get_typing_tracker() -> TypingTracker:
    from campushub.services.typing_tracker import TypingTracker

    return TypingTracker(
        get_datastore(),
        get_fanout_router(),
        expiry_seconds=settings.typing_expiry_seconds,
    )


@lru_cache(maxsize=1)
def get_notification_dispatcher() -> NotificationDispatcher:
    from campushub.services.notifications import NotificationDispatcher

    return NotificationDispatcher(get_datastore(), get_fanout_router())


@lru_cache(maxsize=1)
def get_reminder_sweeper() -> ReminderSweeper:
    from campushub.services.reminders import ReminderSweeper

    return ReminderSweeper(
        get_datastore(),
        get_notification_dispatcher(),
        interval_seconds=settings.reminder_sweep_interval_seconds,
    )


@lru_cache(maxsize=1)
def get_messaging_service() -> GroupMessagingService:
    from campushub.services.messaging import GroupMessagingService

    return GroupMessagingService(
        get_datastore(),
        get_fanout_router(),
        get_notification_dispatcher(),
        notify_on_messages=settings.notify_on_group_messages,
    )


@lru_cache(maxsize=1)
def get_group_service() -> GroupService:
    from campushub.services.groups import GroupService

    return GroupService(get_datastore(), get_fanout_router(), get_typing_tracker())


@lru_cache(maxsize=1)
def get_event_service() -> EventService:
    from campushub.services.events import EventService

    return EventService(get_datastore(), get_fanout_router(), get_notification_dispatcher())


@lru_cache(maxsize=1)
def get_announcement_service() -> AnnouncementService:
    from campushub.services.announcements import AnnouncementService

    return AnnouncementService(
        get_datastore(), get_fanout_router(), get_notification_dispatcher()
    )


@lru_cache(maxsize=1)
def get_account_service() -> AccountService:
    from campushub.services.accounts import AccountService

    return AccountService(get_datastore())


@lru_cache(maxsize=1)
def get_push_channel() -> PushChannel:
    from campushub.services.push_channel import PushChannel

    return PushChannel(
        get_session_registry(),
        get_typing_tracker(),
        get_notification_dispatcher(),
        close_superseded=settings.close_superseded_sessions,
    )


@lru_cache(maxsize=1)
def get_admin_service() -> AdminService:
    from campushub.services.admin import AdminService

    return AdminService(
        get_datastore(),
        get_fanout_router(),
        get_session_registry(),
        get_typing_tracker(),
    )


_PROVIDERS = (
    get_datastore,
    get_session_registry,
    get_fanout_router,
    get_typing_tracker,
    get_notification_dispatcher,
    get_reminder_sweeper,
    get_messaging_service,
    get_group_service,
    get_event_service,
    get_announcement_service,
    get_account_service,
    get_push_channel,
    get_admin_service,
)


def clear_dependency_caches() -> None:
    for provider in _PROVIDERS:
        provider.cache_clear()


__all__ = [provider.__name__ for provider in _PROVIDERS] + ["clear_dependency_caches"]
