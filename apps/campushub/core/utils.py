from __future__ import annotations

import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def new_id() -> str:
    """Opaque string identifier used for every stored entity."""

    return str(uuid.uuid4())


def truncate(text: str, limit: int) -> str:
    """Cut `text` to `limit` characters, marking the cut with an ellipsis."""

    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


__all__ = ["new_id", "truncate", "utcnow"]
