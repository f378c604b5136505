"""Match service: swipe decisions and the discover feed.

A match is a user's like/dislike/superlike on a movie, stored once per
(user, movie) pair. The discover feed serves movies the user has not
matched yet, optionally restricted to their favorite genres.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from filmmatch import models
from filmmatch.config import settings
from filmmatch.errors import AppError
from filmmatch.services.common import Page, paginate
from filmmatch.services.preferences import get_preferences

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MatchStats:
    """Per-status match counts for a user."""
    likes: int
    dislikes: int
    superlikes: int

    @property
    def total(self) -> int:
        return self.likes + self.dislikes + self.superlikes


def _match_query(user_id: int, movie_id: int):
    return (
        select(models.UserMatch)
        .options(selectinload(models.UserMatch.movie).selectinload(models.Movie.categories))
        .where(
            models.UserMatch.user_id == user_id,
            models.UserMatch.movie_id == movie_id,
        )
        .execution_options(populate_existing=True)
    )


async def _load_match(session: AsyncSession, user_id: int, movie_id: int) -> models.UserMatch | None:
    result = await session.execute(_match_query(user_id, movie_id))
    return result.scalar_one_or_none()


async def upsert_match(
    session: AsyncSession,
    user_id: int,
    movie_id: int,
    status: models.MatchStatus,
) -> models.UserMatch:
    """Create or update a match (like/dislike/superlike).

    Args:
        session: Database session
        user_id: Deciding user
        movie_id: Movie swiped on
        status: Decision

    Returns:
        The stored match with its movie loaded

    Raises:
        AppError: 404 if the movie does not exist
    """
    movie = await session.get(models.Movie, movie_id)
    if movie is None:
        raise AppError("Movie not found", 404)

    match = await _load_match(session, user_id, movie_id)
    if match is None:
        session.add(models.UserMatch(user_id=user_id, movie_id=movie_id, status=status))
    else:
        match.status = status

    try:
        await session.commit()
    except IntegrityError:
        # Concurrent insert for the same pair: fall back to updating it
        await session.rollback()
        match = await _load_match(session, user_id, movie_id)
        if match is None:
            raise
        match.status = status
        await session.commit()

    logger.info(f"User {user_id} -> movie {movie_id}: {status.value}")
    result = await session.execute(_match_query(user_id, movie_id))
    return result.scalar_one()


async def get_matchlist(
    session: AsyncSession,
    user_id: int,
    status: models.MatchStatus | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page[models.UserMatch]:
    """Paginated matchlist, newest first.

    Args:
        session: Database session
        user_id: Owner of the matches
        status: Only return matches with this status
        page: 1-based page number
        limit: Page size

    Returns:
        Page of matches with movie and categories loaded
    """
    query = (
        select(models.UserMatch)
        .options(selectinload(models.UserMatch.movie).selectinload(models.Movie.categories))
        .where(models.UserMatch.user_id == user_id)
        .order_by(models.UserMatch.created_at.desc(), models.UserMatch.id.desc())
    )
    if status is not None:
        query = query.where(models.UserMatch.status == status)

    return await paginate(session, query, page=page, limit=limit)


async def get_match_status(session: AsyncSession, user_id: int, movie_id: int) -> models.UserMatch | None:
    """The user's match for a movie, or ``None`` if they have not swiped it."""
    return await _load_match(session, user_id, movie_id)


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle over a copy of ``items``.

    Args:
        items: Sequence to shuffle; left untouched
        rng: Random source, module-level ``random`` when omitted

    Returns:
        New list with the same elements in random order
    """
    rand = rng or random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rand.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


async def get_discover_movies(
    session: AsyncSession,
    user_id: int,
    limit: int | None = None,
    *,
    rng: random.Random | None = None,
) -> list[models.Movie]:
    """Movies for the swipe deck, excluding ones already matched.

    Candidates are restricted to the user's favorite genres when they have
    any. The query over-fetches ``limit * overfetch_factor`` rows without an
    ORDER BY and shuffles them in memory, which gives variety without the
    cost of ``ORDER BY RANDOM()``.

    Args:
        session: Database session
        user_id: User the deck is for
        limit: Number of movies to return (default from config)
        rng: Random source for the shuffle

    Returns:
        Up to ``limit`` movies in random order, categories loaded
    """
    limit = limit or settings.discover.default_limit

    preferences = await get_preferences(session, user_id)
    favorite_genres = preferences.favorite_genres

    query = select(models.Movie).where(
        ~models.Movie.matches.any(models.UserMatch.user_id == user_id)
    )

    if favorite_genres:
        logger.info(f"Filtering discover movies by genres: {', '.join(favorite_genres)}")
        query = query.where(
            models.Movie.categories.any(models.Category.name.in_(favorite_genres))
        )

    query = query.limit(limit * settings.discover.overfetch_factor)

    result = await session.execute(query)
    candidates = result.scalars().all()

    logger.debug(f"Discover for user {user_id}: {len(candidates)} candidates for limit {limit}")
    return shuffle(candidates, rng)[:limit]


async def get_match_stats(session: AsyncSession, user_id: int) -> MatchStats:
    """Count the user's likes, dislikes and superlikes."""
    query = (
        select(models.UserMatch.status, func.count())
        .where(models.UserMatch.user_id == user_id)
        .group_by(models.UserMatch.status)
    )
    result = await session.execute(query)
    counts = {status: count for status, count in result.all()}

    return MatchStats(
        likes=counts.get(models.MatchStatus.LIKE, 0),
        dislikes=counts.get(models.MatchStatus.DISLIKE, 0),
        superlikes=counts.get(models.MatchStatus.SUPERLIKE, 0),
    )


async def delete_match(session: AsyncSession, user_id: int, movie_id: int) -> None:
    """Remove a match so the movie can show up in discover again.

    Raises:
        AppError: 404 if the user has no match for the movie
    """
    match = await _load_match(session, user_id, movie_id)
    if match is None:
        raise AppError("Match not found", 404)

    await session.delete(match)
    await session.commit()
    logger.info(f"Deleted match user {user_id} -> movie {movie_id}")
