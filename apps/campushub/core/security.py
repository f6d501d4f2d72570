"""Bearer tokens and password hashing.

Tokens are HS256 JWTs signed with `SECRET_KEY`. Password hashing runs bcrypt in
a worker thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from campushub.core.settings import settings
from campushub.core.utils import utcnow

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    role: str
    full_name: str


def create_access_token(
    *,
    user_id: str,
    email: str,
    role: str,
    full_name: str,
    expires_delta: timedelta | None = None,
) -> str:
    expires = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_ttl_minutes))
    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "role": role,
        "fullName": full_name,
        "exp": expires,
    }
    return jwt.encode(payload, settings.secret_key.get_secret_value(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenClaims | None:
    """Return the token's claims, or None when it is invalid or expired."""

    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[ALGORITHM],
        )
    except PyJWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return TokenClaims(
        user_id=user_id,
        email=str(payload.get("email") or ""),
        role=str(payload.get("role") or "student"),
        full_name=str(payload.get("fullName") or ""),
    )


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(pwd_context.hash, password)


async def verify_password(password: str, hashed: str) -> bool:
    try:
        return bool(await asyncio.to_thread(pwd_context.verify, password, hashed))
    except ValueError as exc:
        logger.error("Error verifying password: %s", exc)
        return False


__all__ = [
    "TokenClaims",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
