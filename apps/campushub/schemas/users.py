from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field

from campushub.schemas.base import CamelModel

Department = Literal[
    "Computer Science",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Civil Engineering",
    "Business Administration",
    "Arts & Humanities",
    "Natural Sciences",
    "Mathematics",
    "Psychology",
    "Economics",
]

Year = Literal["1st Year", "2nd Year", "3rd Year", "4th Year", "Graduate"]

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRole(str, Enum):
    """Platform-wide role, distinct from the per-group role."""

    student = "student"
    admin = "admin"


class NotificationPreferences(CamelModel):
    """Opt-outs for event-related notifications only."""

    event_registration: bool = True
    event_reminders_24h: bool = Field(default=True, alias="eventReminders24h")
    event_reminders_1h: bool = Field(default=True, alias="eventReminders1h")


class UserPublic(CamelModel):
    id: str
    email: str
    full_name: str
    department: Department
    year: Year
    role: UserRole = UserRole.student
    avatar: str | None = None
    joined_groups: list[str] = Field(default_factory=list)
    notification_preferences: NotificationPreferences = Field(
        default_factory=NotificationPreferences
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


class User(UserPublic):
    """Stored user record. Never returned directly; see `public()`."""

    password_hash: str = Field(default="", exclude=True)

    def public(self) -> UserPublic:
        return UserPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class UserRegister(CamelModel):
    email: str = Field(pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=2)
    department: Department
    year: Year
    avatar: str | None = None


class LoginRequest(CamelModel):
    email: str = Field(pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=6)


class AuthResponse(CamelModel):
    user: UserPublic
    token: str


class ProfileUpdate(CamelModel):
    full_name: str | None = Field(default=None, min_length=2)
    department: Department | None = None
    year: Year | None = None


class PreferencesUpdate(CamelModel):
    event_registration: bool | None = None
    event_reminders_24h: bool | None = Field(default=None, alias="eventReminders24h")
    event_reminders_1h: bool | None = Field(default=None, alias="eventReminders1h")
