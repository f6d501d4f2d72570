"""Service layer package.

The realtime core lives in `session_registry`, `fanout`, `typing_tracker`,
`messaging`, `notifications` and `reminders`; the remaining modules are the
request/response services that feed it. Providers in
`campushub.core.dependencies` wire them together.
"""

from __future__ import annotations

from .datastore import DataStore, InMemoryDataStore
from .fanout import FanoutRouter
from .session_registry import PushConnection, Session, SessionRegistry

__all__ = [
    "DataStore",
    "FanoutRouter",
    "InMemoryDataStore",
    "PushConnection",
    "Session",
    "SessionRegistry",
]
