from __future__ import annotations

from fastapi import APIRouter, Depends, status

from campushub.api.dependencies import get_current_user, require_admin
from campushub.core.dependencies import get_announcement_service
from campushub.schemas.announcements import Announcement, AnnouncementCreate
from campushub.schemas.users import UserPublic
from campushub.services.announcements import AnnouncementService

router = APIRouter(prefix="/api/announcements", tags=["announcements"])


@router.get("", response_model=list[Announcement])
async def list_announcements(
    _user: UserPublic = Depends(get_current_user),
    announcements: AnnouncementService = Depends(get_announcement_service),
) -> list[Announcement]:
    return await announcements.list_announcements()


@router.post("", response_model=Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    admin: UserPublic = Depends(require_admin),
    announcements: AnnouncementService = Depends(get_announcement_service),
) -> Announcement:
    return await announcements.create_announcement(admin, payload)


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: str,
    _admin: UserPublic = Depends(require_admin),
    announcements: AnnouncementService = Depends(get_announcement_service),
) -> dict[str, str]:
    await announcements.delete_announcement(announcement_id)
    return {"message": "Announcement deleted"}
