from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from campushub.core.utils import new_id
from campushub.schemas.groups import Group, GroupRole
from campushub.schemas.users import User, UserPublic, UserRole
from campushub.services.admin import AdminService
from campushub.services.announcements import AnnouncementService
from campushub.services.datastore import InMemoryDataStore
from campushub.services.events import EventService
from campushub.services.fanout import FanoutRouter
from campushub.services.groups import GroupService
from campushub.services.messaging import GroupMessagingService
from campushub.services.notifications import NotificationDispatcher
from campushub.services.reminders import ReminderSweeper
from campushub.services.session_registry import SessionRegistry
from campushub.services.typing_tracker import TypingTracker


class FakeConnection:
    """Records outbound frames synchronously."""

    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []
        self.open = True
        self.close_code: int | None = None

    @property
    def is_open(self) -> bool:
        return self.open

    def send(self, frame: dict[str, Any]) -> None:
        self.frames.append(frame)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.open = False
        self.close_code = code

    def of_type(self, frame_type: str) -> list[dict[str, Any]]:
        return [f for f in self.frames if f["type"] == frame_type]

    @property
    def types(self) -> list[str]:
        return [f["type"] for f in self.frames]


@dataclass
class _FakeTimer:
    due: float
    callback: Callable[[], Awaitable[None]]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for the event loop's `call_later`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], Awaitable[None]]) -> _FakeTimer:
        timer = _FakeTimer(due=self.now + delay, callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    async def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self._timers if not t.cancelled and t.due <= self.now),
            key=lambda t: t.due,
        )
        for timer in due:
            self._timers.remove(timer)
            await timer.callback()


@dataclass
class Hub:
    """The realtime core wired against an in-memory store and fake timers."""

    store: InMemoryDataStore = field(default_factory=InMemoryDataStore)
    sessions: SessionRegistry = field(default_factory=SessionRegistry)
    scheduler: FakeScheduler = field(default_factory=FakeScheduler)

    def __post_init__(self) -> None:
        self.router = FanoutRouter(self.sessions)
        self.typing = TypingTracker(
            self.store, self.router, scheduler=self.scheduler, expiry_seconds=3.0
        )
        self.notifications = NotificationDispatcher(self.store, self.router)
        self.messaging = GroupMessagingService(self.store, self.router, self.notifications)
        self.groups = GroupService(self.store, self.router, self.typing)
        self.events = EventService(self.store, self.router, self.notifications)
        self.announcements = AnnouncementService(self.store, self.router, self.notifications)
        self.sweeper = ReminderSweeper(self.store, self.notifications)
        self.admin = AdminService(self.store, self.router, self.sessions, self.typing)

    async def add_user(
        self,
        name: str,
        *,
        role: UserRole = UserRole.student,
        **overrides: Any,
    ) -> UserPublic:
        user = User(
            id=overrides.pop("id", new_id()),
            email=f"{name.lower().replace(' ', '.')}@campus.edu",
            full_name=name,
            department="Computer Science",
            year="2nd Year",
            role=role,
            **overrides,
        )
        await self.store.save_user(user)
        return user.public()

    async def add_group(
        self,
        creator: UserPublic,
        *members: UserPublic,
        name: str = "Robotics Club",
    ) -> Group:
        group = Group(
            id=new_id(),
            name=name,
            category="Clubs",
            created_by=creator.id,
            members=[creator.id, *(m.id for m in members)],
            member_roles={
                creator.id: GroupRole.creator,
                **{m.id: GroupRole.member for m in members},
            },
            member_count=1 + len(members),
        )
        await self.store.save_group(group)
        return group

    def connect(self, user: UserPublic) -> FakeConnection:
        connection = FakeConnection()
        self.sessions.register(user.id, connection)
        return connection


@pytest.fixture
def hub() -> Hub:
    return Hub()


@pytest.fixture
def make_connection() -> Callable[[], FakeConnection]:
    return FakeConnection
