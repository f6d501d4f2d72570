from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.api.dependencies import get_current_user
from campushub.core.dependencies import get_notification_dispatcher
from campushub.schemas.notifications import Notification
from campushub.schemas.users import UserPublic
from campushub.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
async def list_notifications(
    user: UserPublic = Depends(get_current_user),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> list[Notification]:
    return await notifications.list_for_user(user.id)


@router.patch("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    user: UserPublic = Depends(get_current_user),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Notification:
    return await notifications.mark_read(notification_id, user.id)


@router.post("/mark-all-read")
async def mark_all_read(
    user: UserPublic = Depends(get_current_user),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> dict[str, int]:
    return {"updated": await notifications.mark_all_read(user.id)}
