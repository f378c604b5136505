"""Password hashing, JWT access tokens and the current-user dependency."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from . import models
from .config import settings
from .db import get_session
from .errors import AppError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header goes through AppError like every other 401
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against a hash; accounts without one never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(user_id: int, *, expires_minutes: int | None = None) -> str:
    """Signed JWT whose ``sub`` is the user id."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes or settings.auth.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Validate a token and return the user id it was issued for.

    Raises:
        AppError: 401 if the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth.jwt_secret,
            algorithms=[settings.auth.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AppError("Token expired", 401) from e
    except jwt.InvalidTokenError as e:
        raise AppError("Invalid token", 401) from e

    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise AppError("Invalid token subject", 401) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> models.User:
    """FastAPI dependency resolving the bearer token to an active user."""
    if credentials is None or not credentials.credentials:
        raise AppError("Not authenticated", 401)

    user_id = decode_access_token(credentials.credentials)
    user = await session.get(models.User, user_id)
    if user is None or not user.is_active:
        raise AppError("User not found or inactive", 401)
    return user
