from __future__ import annotations

from pydantic import Field

from campushub.schemas.base import CamelModel
from campushub.schemas.users import Department, UserRole, Year


class AdminUserUpdate(CamelModel):
    """Fields a platform admin may change on any account."""

    role: UserRole | None = None
    full_name: str | None = Field(default=None, min_length=2)
    department: Department | None = None
    year: Year | None = None


class DashboardStats(CamelModel):
    total_announcements: int
    total_groups: int
    upcoming_events: int
    unread_notifications: int


class AdminStats(DashboardStats):
    total_users: int
    total_events: int
