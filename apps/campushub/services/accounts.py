"""Registration, login and profile management."""

from __future__ import annotations

import asyncio
import logging

from campushub.core.exceptions import AuthenticationError, NotFoundError, ValidationFailedError
from campushub.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from campushub.core.utils import new_id
from campushub.schemas.users import (
    AuthResponse,
    LoginRequest,
    PreferencesUpdate,
    ProfileUpdate,
    User,
    UserPublic,
    UserRegister,
    UserRole,
)
from campushub.services.datastore import DataStore

logger = logging.getLogger(__name__)


def _issue_token(user: UserPublic) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
        full_name=user.full_name,
    )


class AccountService:
    def __init__(self, store: DataStore) -> None:
        self._store = store
        # Serialises the email check with the write; hashing yields in between.
        self._register_lock = asyncio.Lock()

    async def register(self, payload: UserRegister) -> AuthResponse:
        email = payload.email.strip().lower()
        await self._ensure_email_free(email)
        password_hash = await hash_password(payload.password)

        user = User(
            id=new_id(),
            email=email,
            password_hash=password_hash,
            full_name=payload.full_name,
            department=payload.department,
            year=payload.year,
            role=UserRole.student,
            avatar=payload.avatar,
        )
        async with self._register_lock:
            await self._ensure_email_free(email)
            await self._store.save_user(user)
        logger.info("Registered user %s", user.id)

        public = user.public()
        return AuthResponse(user=public, token=_issue_token(public))

    async def login(self, payload: LoginRequest) -> AuthResponse:
        user = await self._store.get_user_by_email(payload.email)
        if user is None or not await verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        public = user.public()
        return AuthResponse(user=public, token=_issue_token(public))

    async def authenticate(self, token: str) -> UserPublic | None:
        """Resolve a bearer token to its (current) user record."""

        claims = decode_access_token(token)
        if claims is None:
            return None
        user = await self._store.get_user(claims.user_id)
        return user.public() if user is not None else None

    async def get_profile(self, user_id: str) -> UserPublic:
        return (await self._load(user_id)).public()

    async def update_profile(self, user_id: str, payload: ProfileUpdate) -> UserPublic:
        user = await self._load(user_id)
        for field, value in payload.model_dump(by_alias=False, exclude_none=True).items():
            setattr(user, field, value)
        await self._store.save_user(user)
        return user.public()

    async def update_preferences(self, user_id: str, payload: PreferencesUpdate) -> UserPublic:
        user = await self._load(user_id)
        prefs = user.notification_preferences
        for field, value in payload.model_dump(by_alias=False, exclude_none=True).items():
            setattr(prefs, field, value)
        await self._store.save_user(user)
        return user.public()

    async def _ensure_email_free(self, email: str) -> None:
        if await self._store.get_user_by_email(email) is not None:
            raise ValidationFailedError("Email already registered", code="email_taken")

    async def _load(self, user_id: str) -> User:
        user = await self._store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


__all__ = ["AccountService"]
