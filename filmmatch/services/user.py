"""User profile lookup and updates."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.errors import AppError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "username",
    "nickname",
    "bio",
    "profile_picture",
    "twitter_url",
    "instagram_url",
})


async def get_user(session: AsyncSession, user_id: int) -> models.User:
    user = await session.get(models.User, user_id)
    if user is None:
        raise AppError("User not found", 404)
    return user


async def get_user_by_username(session: AsyncSession, username: str) -> models.User:
    """Case-insensitive lookup of an active user."""
    result = await session.execute(
        select(models.User).where(
            func.lower(models.User.username) == username.lower(),
            models.User.is_active.is_(True),
        )
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise AppError("User not found", 404)
    return user


async def username_taken(session: AsyncSession, username: str, *, exclude_user_id: int | None = None) -> bool:
    query = select(models.User.id).where(func.lower(models.User.username) == username.lower())
    if exclude_user_id is not None:
        query = query.where(models.User.id != exclude_user_id)
    result = await session.execute(query)
    return result.first() is not None


async def update_user(session: AsyncSession, user_id: int, data: Mapping[str, Any]) -> models.User:
    """Apply validated profile changes.

    Args:
        session: Database session
        user_id: User being updated
        data: Already-validated fields (see ``UpdateUserRequest.changes``);
            keys outside the updatable set are ignored

    Returns:
        The updated user

    Raises:
        AppError: 404 for an unknown user, 409 if the username is taken
    """
    user = await get_user(session, user_id)
    changes = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}

    username = changes.get("username")
    if username is None:
        # username is required on the row, an explicit null leaves it as is
        changes.pop("username", None)
    elif username != user.username and await username_taken(session, username, exclude_user_id=user_id):
        raise AppError(f"Username '{username}' is already taken", 409)

    if "nickname" in changes and changes["nickname"] is None:
        changes.pop("nickname")

    for key, value in changes.items():
        setattr(user, key, value)

    await session.commit()
    await session.refresh(user)
    logger.info(f"Updated user {user_id}: {', '.join(sorted(changes)) or 'no changes'}")
    return user
