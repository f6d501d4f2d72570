"""Shared API dependencies."""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campushub.core.dependencies import get_account_service
from campushub.core.exceptions import AuthenticationError, ForbiddenError
from campushub.schemas.users import UserPublic
from campushub.services.accounts import AccountService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    accounts: AccountService = Depends(get_account_service),
) -> UserPublic:
    if credentials is None:
        raise AuthenticationError("Authentication required")
    user = await accounts.authenticate(credentials.credentials)
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user


async def require_admin(user: UserPublic = Depends(get_current_user)) -> UserPublic:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
