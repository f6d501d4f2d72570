from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.api.dependencies import get_current_user
from campushub.core.dependencies import get_account_service
from campushub.schemas.users import PreferencesUpdate, ProfileUpdate, UserPublic
from campushub.services.accounts import AccountService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile", response_model=UserPublic)
async def get_profile(
    user: UserPublic = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> UserPublic:
    return await accounts.get_profile(user.id)


@router.patch("/profile", response_model=UserPublic)
async def update_profile(
    payload: ProfileUpdate,
    user: UserPublic = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> UserPublic:
    return await accounts.update_profile(user.id, payload)


@router.patch("/profile/notification-preferences", response_model=UserPublic)
async def update_notification_preferences(
    payload: PreferencesUpdate,
    user: UserPublic = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> UserPublic:
    return await accounts.update_preferences(user.id, payload)
