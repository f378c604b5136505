"""Rating service: 1-10 scores with optional reviews.

Clients work on a five-star scale; the stored score is ``stars * 2``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.errors import AppError
from filmmatch.services.common import Page, paginate

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10
STAR_SCALE = 5


@dataclass
class RatingSummary:
    """Aggregate of all ratings for a movie."""
    movie_id: int
    average: float
    count: int


@dataclass
class RatingStats:
    """Aggregate of one user's ratings on the five-star scale."""
    count: int
    average: float
    distribution: dict[int, int] = field(default_factory=dict)


def stars_to_score(stars: int) -> int:
    """Five-star client value to the stored 1-10 score."""
    if not 1 <= stars <= STAR_SCALE:
        raise AppError(f"stars must be between 1 and {STAR_SCALE}", 400)
    return stars * 2


def score_to_stars(score: int) -> int:
    """Stored 1-10 score to stars; odd scores round up (7 -> 4)."""
    return math.ceil(score / 2)


def _round1(value: float) -> float:
    return round(value * 10) / 10


def _rating_query(user_id: int, movie_id: int):
    return (
        select(models.UserRating)
        .where(
            models.UserRating.user_id == user_id,
            models.UserRating.movie_id == movie_id,
        )
        .execution_options(populate_existing=True)
    )


async def _find(session: AsyncSession, user_id: int, movie_id: int) -> models.UserRating | None:
    result = await session.execute(_rating_query(user_id, movie_id))
    return result.scalar_one_or_none()


async def upsert_rating(
    session: AsyncSession,
    user_id: int,
    movie_id: int,
    rating: int,
    review: str | None = None,
) -> models.UserRating:
    """Create or update the user's rating for a movie.

    Args:
        session: Database session
        user_id: Rating author
        movie_id: Rated movie
        rating: Score between 1 and 10
        review: Optional free text, blank becomes ``None``

    Returns:
        The stored rating

    Raises:
        AppError: 400 for an out-of-range score, 404 if the movie is missing
    """
    if not MIN_SCORE <= rating <= MAX_SCORE:
        raise AppError(f"rating must be between {MIN_SCORE} and {MAX_SCORE}", 400)

    if await session.get(models.Movie, movie_id) is None:
        raise AppError("Movie not found", 404)

    review = review.strip() if review else None
    record = await _find(session, user_id, movie_id)
    if record is None:
        record = models.UserRating(user_id=user_id, movie_id=movie_id, rating=rating, review=review or None)
        session.add(record)
    else:
        record.rating = rating
        record.review = review or None

    await session.commit()
    logger.info(f"User {user_id} rated movie {movie_id}: {rating}/10")

    result = await session.execute(_rating_query(user_id, movie_id))
    return result.scalar_one()


async def list_user_ratings(
    session: AsyncSession,
    user_id: int,
    page: int = 1,
    limit: int = 20,
) -> Page[models.UserRating]:
    """The user's ratings, most recently updated first."""
    query = (
        select(models.UserRating)
        .where(models.UserRating.user_id == user_id)
        .order_by(models.UserRating.updated_at.desc(), models.UserRating.id.desc())
    )
    return await paginate(session, query, page=page, limit=limit)


async def get_user_rating(session: AsyncSession, user_id: int, movie_id: int) -> models.UserRating | None:
    return await _find(session, user_id, movie_id)


async def delete_rating(session: AsyncSession, user_id: int, movie_id: int) -> None:
    """Delete the user's rating for a movie.

    Raises:
        AppError: 404 if the user has not rated the movie
    """
    record = await _find(session, user_id, movie_id)
    if record is None:
        raise AppError("Rating not found", 404)

    await session.delete(record)
    await session.commit()
    logger.info(f"Deleted rating user {user_id} -> movie {movie_id}")


async def get_movie_rating_summary(session: AsyncSession, movie_id: int) -> RatingSummary:
    """Average score and rating count for a movie.

    Raises:
        AppError: 404 if the movie does not exist
    """
    if await session.get(models.Movie, movie_id) is None:
        raise AppError("Movie not found", 404)

    result = await session.execute(
        select(func.avg(models.UserRating.rating), func.count(models.UserRating.id))
        .where(models.UserRating.movie_id == movie_id)
    )
    average, count = result.one()
    return RatingSummary(
        movie_id=movie_id,
        average=_round1(float(average)) if average is not None else 0.0,
        count=count,
    )


async def get_user_rating_stats(session: AsyncSession, user_id: int) -> RatingStats:
    """Count, average and distribution of the user's ratings in stars.

    The average is rounded to one decimal and is 0 when the user has not
    rated anything. Every star bucket from 1 to 5 is present.
    """
    result = await session.execute(
        select(models.UserRating.rating).where(models.UserRating.user_id == user_id)
    )
    stars = [score_to_stars(score) for score in result.scalars().all()]

    distribution = {bucket: 0 for bucket in range(1, STAR_SCALE + 1)}
    for value in stars:
        if 1 <= value <= STAR_SCALE:
            distribution[value] += 1

    average = _round1(sum(stars) / len(stars)) if stars else 0.0
    return RatingStats(count=len(stars), average=average, distribution=distribution)
