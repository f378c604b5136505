"""User discover preferences."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models

logger = logging.getLogger(__name__)


@dataclass
class Preferences:
    """Decoded preferences for a user."""
    user_id: int
    favorite_genres: list[str] = field(default_factory=list)


def parse_favorite_genres(raw: str | None) -> list[str]:
    """Decode the stored ``favorite_genres`` JSON.

    Anything that is not a JSON list of strings is logged and treated as
    no favorites, so a corrupt row never breaks the discover feed.
    """
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Error parsing favorite_genres {raw!r}: {e}")
        return []

    if not isinstance(value, list):
        logger.warning(f"favorite_genres is not a list: {raw!r}")
        return []
    return [g for g in value if isinstance(g, str) and g]


def _dedupe(genres: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for genre in genres:
        genre = genre.strip()
        if genre and genre not in seen:
            seen.add(genre)
            result.append(genre)
    return result


async def _find(session: AsyncSession, user_id: int) -> models.UserPreferences | None:
    result = await session.execute(
        select(models.UserPreferences).where(models.UserPreferences.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_preferences(session: AsyncSession, user_id: int) -> Preferences:
    """Stored preferences, or empty defaults when the user never set any."""
    record = await _find(session, user_id)
    if record is None:
        return Preferences(user_id=user_id)
    return Preferences(user_id=user_id, favorite_genres=parse_favorite_genres(record.favorite_genres))


async def update_preferences(
    session: AsyncSession,
    user_id: int,
    *,
    favorite_genres: list[str],
) -> Preferences:
    """Create or replace a user's preferences.

    Args:
        session: Database session
        user_id: Owner
        favorite_genres: Category names; duplicates are dropped, order kept

    Returns:
        The stored preferences
    """
    genres = _dedupe(favorite_genres)
    record = await _find(session, user_id)
    if record is None:
        record = models.UserPreferences(user_id=user_id)
        session.add(record)

    record.favorite_genres = json.dumps(genres, ensure_ascii=False)

    await session.commit()
    logger.info(f"Updated preferences for user {user_id}: {len(genres)} favorite genres")
    return Preferences(user_id=user_id, favorite_genres=genres)
