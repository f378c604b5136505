"""Movie catalogue and categories (public, no auth)."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch.db import get_session
from filmmatch.schemas import (
    CategoryResponse,
    CategorySlugParams,
    MovieListResponse,
    MovieResponse,
    RatingSummaryResponse,
)
from filmmatch.services import movie as movie_service
from filmmatch.services import rating as rating_service
from filmmatch.services.common import Page

router = APIRouter(tags=["movies"])


def _movie_page(result: Page) -> MovieListResponse:
    return MovieListResponse(
        items=[MovieResponse.model_validate(m) for m in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/movies", response_model=MovieListResponse)
async def list_movies(
    search: str | None = Query(default=None, max_length=100),
    category: str | None = Query(default=None, description="Category slug"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> MovieListResponse:
    """Browse or search the catalogue."""
    result = await movie_service.list_movies(
        session,
        page,
        limit,
        search=search,
        category_slug=category,
    )
    return _movie_page(result)


@router.get("/movies/{movie_id}", response_model=MovieResponse)
async def get_movie(movie_id: int, session: AsyncSession = Depends(get_session)) -> MovieResponse:
    movie = await movie_service.get_movie(session, movie_id)
    return MovieResponse.model_validate(movie)


@router.get("/movies/{movie_id}/ratings/summary", response_model=RatingSummaryResponse)
async def movie_rating_summary(
    movie_id: int,
    session: AsyncSession = Depends(get_session),
) -> RatingSummaryResponse:
    """Average user score for a movie."""
    summary = await rating_service.get_movie_rating_summary(session, movie_id)
    return RatingSummaryResponse(movie_id=summary.movie_id, average=summary.average, count=summary.count)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(session: AsyncSession = Depends(get_session)) -> list[CategoryResponse]:
    categories = await movie_service.list_categories(session)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/categories/{slug}/movies", response_model=MovieListResponse)
async def movies_by_category(
    params: CategorySlugParams = Depends(),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> MovieListResponse:
    """Movies in one category; 404 for an unknown slug."""
    category = await movie_service.get_category_by_slug(session, params.slug)
    result = await movie_service.list_movies(session, page, limit, category_slug=category.slug)
    return _movie_page(result)
