"""Per-group "who is typing" state with automatic expiry.

Each (group, user) pair is either idle (no entry) or typing (entry plus a
running expiry timer). Only the idle -> typing transition is broadcast; a
repeated `typing_start` just restarts the timer. A stop, an expiry, or the
user's session closing removes the entry and broadcasts the remaining list to
the other members of the group.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from campushub.schemas.realtime import OutboundEventType, PushEvent, TypingUpdate, TypingUser
from campushub.services.datastore import DataStore
from campushub.services.fanout import FanoutRouter

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle: ...


class AsyncioScheduler:
    """Runs timer callbacks as tasks on the running event loop."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, self._spawn, callback)

    def _spawn(self, callback: TimerCallback) -> None:
        task = asyncio.get_running_loop().create_task(self._run(callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @staticmethod
    async def _run(callback: TimerCallback) -> None:
        try:
            await callback()
        except Exception:
            logger.exception("Timer callback failed")


@dataclass
class TypingEntry:
    group_id: str
    user_id: str
    user_name: str
    handle: TimerHandle | None = None
    generation: int = 0


class TypingTracker:
    def __init__(
        self,
        store: DataStore,
        router: FanoutRouter,
        *,
        scheduler: Scheduler | None = None,
        expiry_seconds: float = 3.0,
    ) -> None:
        self._store = store
        self._router = router
        self._scheduler = scheduler or AsyncioScheduler()
        self._expiry_seconds = expiry_seconds
        self._groups: dict[str, dict[str, TypingEntry]] = {}

    def typing_users(self, group_id: str) -> list[TypingUser]:
        entries = self._groups.get(group_id, {})
        return [TypingUser(user_id=e.user_id, user_name=e.user_name) for e in entries.values()]

    def is_typing(self, group_id: str, user_id: str) -> bool:
        return user_id in self._groups.get(group_id, {})

    async def on_typing_start(self, group_id: str, user_id: str, user_name: str) -> None:
        group = await self._store.get_group(group_id)
        if group is None or not group.is_member(user_id):
            logger.debug("Ignoring typing_start from %s for group %s", user_id, group_id)
            return

        entries = self._groups.setdefault(group_id, {})
        entry = entries.get(user_id)
        if entry is not None:
            self._arm(entry)
            return

        entry = TypingEntry(group_id=group_id, user_id=user_id, user_name=user_name)
        entries[user_id] = entry
        self._arm(entry)
        await self._broadcast(group_id, exclude=user_id)

    async def on_typing_stop(self, group_id: str, user_id: str) -> None:
        if self._remove(group_id, user_id) is None:
            return
        await self._broadcast(group_id, exclude=user_id)

    async def clear_user(self, user_id: str) -> None:
        """Drop the user's entries in every group, e.g. when their session closes."""

        affected = [gid for gid, entries in self._groups.items() if user_id in entries]
        for group_id in affected:
            self._remove(group_id, user_id)
        for group_id in affected:
            await self._broadcast(group_id, exclude=user_id)

    def clear_group(self, group_id: str) -> None:
        """Cancel every timer for a group that no longer exists. Nothing is broadcast."""

        for entry in self._groups.pop(group_id, {}).values():
            self._cancel(entry)

    def shutdown(self) -> None:
        for group_id in list(self._groups):
            self.clear_group(group_id)

    def _arm(self, entry: TypingEntry) -> None:
        self._cancel(entry)
        entry.generation += 1
        generation = entry.generation

        async def _expire() -> None:
            await self._on_expired(entry, generation)

        entry.handle = self._scheduler.call_later(self._expiry_seconds, _expire)

    async def _on_expired(self, entry: TypingEntry, generation: int) -> None:
        current = self._groups.get(entry.group_id, {}).get(entry.user_id)
        # A refresh or stop since this timer was armed makes it stale.
        if current is not entry or entry.generation != generation:
            return
        entry.handle = None
        self._remove(entry.group_id, entry.user_id)
        logger.debug("Typing indicator expired for %s in group %s", entry.user_id, entry.group_id)
        await self._broadcast(entry.group_id, exclude=entry.user_id)

    def _remove(self, group_id: str, user_id: str) -> TypingEntry | None:
        entries = self._groups.get(group_id)
        if not entries or user_id not in entries:
            return None
        entry = entries.pop(user_id)
        self._cancel(entry)
        if not entries:
            del self._groups[group_id]
        return entry

    @staticmethod
    def _cancel(entry: TypingEntry) -> None:
        if entry.handle is not None:
            entry.handle.cancel()
            entry.handle = None

    async def _broadcast(self, group_id: str, *, exclude: str) -> None:
        group = await self._store.get_group(group_id)
        if group is None:
            return
        update = TypingUpdate(group_id=group_id, typing_users=self.typing_users(group_id))
        self._router.to_group(
            group_id,
            PushEvent(type=OutboundEventType.typing_update, data=update),
            group.members,
            exclude=exclude,
        )


__all__ = ["AsyncioScheduler", "Scheduler", "TimerHandle", "TypingEntry", "TypingTracker"]
