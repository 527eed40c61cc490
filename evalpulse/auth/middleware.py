"""Bearer API key authentication."""

import hashlib
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from evalpulse.config import settings
from evalpulse.database import get_db
from evalpulse.models import User
from evalpulse.storage.repositories import get_user_by_api_key_hash

API_KEY_HEADER = APIKeyHeader(name="Authorization", auto_error=False)


def hash_api_key(api_key: str) -> str:
    """Hash API key with salt for storage/lookup."""
    return hashlib.sha256(
        f"{settings.api_key_hash_salt}:{api_key}".encode()
    ).hexdigest()


def parse_bearer(auth_header: str | None) -> str | None:
    """Token from ``Authorization: Bearer <token>``, or None."""
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


class ApiKeyIdentityProvider:
    """Resolves a bearer API key to the owning user id."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def verify(self, token: str) -> str | None:
        user = await self.resolve(token)
        return str(user.user_id) if user else None

    async def resolve(self, token: str) -> User | None:
        if not token:
            return None
        return await get_user_by_api_key_hash(self._db, hash_api_key(token))


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_header: str | None = Depends(API_KEY_HEADER),
) -> User:
    """Extract user from Bearer token (API key)."""
    token = parse_bearer(auth_header)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    user = await ApiKeyIdentityProvider(db).resolve(token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
    return user


# Type alias for dependency injection
CurrentUserDep = Annotated[User, Depends(get_current_user)]
