"""Pydantic schemas shared across the app."""

from .admin import AdminStats, AdminUserUpdate, DashboardStats
from .announcements import Announcement, AnnouncementCreate, Priority
from .base import CamelModel, to_wire
from .events import Event, EventCreate
from .groups import (
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
from .messages import (
    Message,
    MessageCreate,
    MessageEdit,
    MessagePage,
    MessageRef,
    MessageType,
    ReactionRequest,
)
from .notifications import (
    Notification,
    NotificationCreate,
    NotificationType,
    PreferenceKey,
    ReminderType,
)
from .realtime import OutboundEventType, PushEvent
from .users import (
    AuthResponse,
    LoginRequest,
    NotificationPreferences,
    PreferencesUpdate,
    ProfileUpdate,
    User,
    UserPublic,
    UserRegister,
    UserRole,
)

__all__ = [
    "AdminStats",
    "AdminUserUpdate",
    "Announcement",
    "AnnouncementCreate",
    "AuthResponse",
    "CamelModel",
    "DashboardStats",
    "Event",
    "EventCreate",
    "Group",
    "GroupCreate",
    "GroupMember",
    "GroupPost",
    "GroupPostCreate",
    "GroupRole",
    "GroupRulesUpdate",
    "LoginRequest",
    "MemberRoleUpdate",
    "MembershipResult",
    "Message",
    "MessageCreate",
    "MessageEdit",
    "MessagePage",
    "MessageRef",
    "MessageType",
    "Notification",
    "NotificationCreate",
    "NotificationPreferences",
    "NotificationType",
    "OutboundEventType",
    "PostPage",
    "PreferenceKey",
    "PreferencesUpdate",
    "Priority",
    "ProfileUpdate",
    "PushEvent",
    "ReactionRequest",
    "ReminderType",
    "User",
    "UserPublic",
    "UserRegister",
    "UserRole",
    "to_wire",
]
