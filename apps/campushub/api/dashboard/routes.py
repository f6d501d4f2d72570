from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.api.dependencies import get_current_user
from campushub.core.dependencies import get_admin_service
from campushub.schemas.admin import DashboardStats
from campushub.schemas.users import UserPublic
from campushub.services.admin import AdminService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    user: UserPublic = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> DashboardStats:
    return await admin_service.dashboard_stats(user.id)
