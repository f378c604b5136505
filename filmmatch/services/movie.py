"""Movie catalogue and categories."""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.errors import AppError
from filmmatch.services.common import Page, paginate
from filmmatch.text import escape_like, normalize_search_query, slugify

logger = logging.getLogger(__name__)


async def list_movies(
    session: AsyncSession,
    page: int = 1,
    limit: int = 20,
    *,
    search: str | None = None,
    category_slug: str | None = None,
) -> Page[models.Movie]:
    """Paginated catalogue ordered by title.

    Args:
        session: Database session
        page: 1-based page number
        limit: Page size
        search: Case-insensitive substring of the title
        category_slug: Only movies in this category

    Returns:
        Page of movies with categories loaded
    """
    query = select(models.Movie).order_by(models.Movie.title, models.Movie.id)

    search = normalize_search_query(search)
    if search:
        query = query.where(models.Movie.title.ilike(f"%{escape_like(search)}%", escape="\\"))

    if category_slug:
        query = query.where(models.Movie.categories.any(models.Category.slug == category_slug))

    return await paginate(session, query, page=page, limit=limit)


async def get_movie(session: AsyncSession, movie_id: int) -> models.Movie:
    """Raises AppError(404) when the movie does not exist."""
    movie = await session.get(models.Movie, movie_id)
    if movie is None:
        raise AppError("Movie not found", 404)
    return movie


async def list_categories(session: AsyncSession) -> list[models.Category]:
    result = await session.execute(select(models.Category).order_by(models.Category.name))
    return list(result.scalars().all())


async def get_category_by_slug(session: AsyncSession, slug: str) -> models.Category:
    """Raises AppError(404) when no category has this slug."""
    result = await session.execute(select(models.Category).where(models.Category.slug == slug))
    category = result.scalar_one_or_none()
    if category is None:
        raise AppError(f"Category '{slug}' not found", 404)
    return category


async def get_or_create_category(
    session: AsyncSession,
    name: str,
    description: str | None = None,
) -> models.Category:
    """Find a category by name, creating it with a derived slug if needed."""
    result = await session.execute(select(models.Category).where(models.Category.name == name))
    category = result.scalar_one_or_none()
    if category is None:
        category = models.Category(name=name, slug=slugify(name), description=description)
        session.add(category)
        await session.flush()
        logger.debug(f"Created category {name} ({category.slug})")
    return category


async def create_movie(
    session: AsyncSession,
    *,
    title: str,
    category_names: Iterable[str] = (),
    overview: str | None = None,
    year: int | None = None,
    duration: int | None = None,
    rating: float | None = None,
    director: str | None = None,
    poster_url: str | None = None,
    backdrop_url: str | None = None,
    trailer_url: str | None = None,
) -> models.Movie:
    """Insert a movie and link it to its categories.

    The caller owns the transaction; this only flushes.
    """
    categories = [await get_or_create_category(session, name) for name in dict.fromkeys(category_names)]

    movie = models.Movie(
        title=title,
        overview=overview,
        year=year,
        duration=duration,
        rating=rating,
        director=director,
        poster_url=poster_url,
        backdrop_url=backdrop_url,
        trailer_url=trailer_url,
        categories=categories,
    )
    session.add(movie)
    await session.flush()
    return movie
