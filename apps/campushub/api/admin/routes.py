"""Platform-admin endpoints. Every route requires the `admin` platform role."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.api.dependencies import require_admin
from campushub.core.dependencies import get_admin_service, get_group_service
from campushub.schemas.admin import AdminStats, AdminUserUpdate
from campushub.schemas.groups import Group
from campushub.schemas.users import UserPublic
from campushub.services.admin import AdminService
from campushub.services.groups import GroupService

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/students", response_model=list[UserPublic])
async def list_students(
    _admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> list[UserPublic]:
    return await admin_service.list_students()


@router.get("/users", response_model=list[UserPublic])
async def list_users(
    _admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> list[UserPublic]:
    return await admin_service.list_users()


@router.put("/users/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    _admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserPublic:
    return await admin_service.update_user(user_id, payload)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> dict[str, str]:
    await admin_service.delete_user(admin, user_id)
    return {"message": "User deleted successfully"}


@router.get("/groups", response_model=list[Group])
async def list_groups(
    _admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> list[Group]:
    return await admin_service.list_groups()


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: str,
    _admin: UserPublic = Depends(require_admin),
    groups: GroupService = Depends(get_group_service),
) -> dict[str, str]:
    await groups.delete_group(group_id)
    return {"message": "Group deleted successfully"}


@router.get("/stats", response_model=AdminStats)
async def admin_stats(
    admin: UserPublic = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStats:
    return await admin_service.admin_stats(admin.id)
