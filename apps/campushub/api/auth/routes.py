from __future__ import annotations

from fastapi import APIRouter, Depends, status

from campushub.core.dependencies import get_account_service
from campushub.schemas.users import AuthResponse, LoginRequest, UserRegister
from campushub.services.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    return await accounts.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    return await accounts.login(payload)
