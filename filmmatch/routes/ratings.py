"""User ratings and reviews."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.db import get_session
from filmmatch.schemas import (
    CreateRatingRequest,
    RatingListResponse,
    RatingResponse,
    RatingStatsResponse,
)
from filmmatch.security import get_current_user
from filmmatch.services import rating as rating_service

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
async def create_or_update_rating(
    request: CreateRatingRequest,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> RatingResponse:
    """Rate a movie 1-10, replacing any earlier rating."""
    rating = await rating_service.upsert_rating(
        session,
        user.id,
        request.movie_id,
        request.rating,
        request.review,
    )
    return RatingResponse.model_validate(rating)


@router.get("", response_model=RatingListResponse)
async def list_my_ratings(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> RatingListResponse:
    result = await rating_service.list_user_ratings(session, user.id, page, limit)
    return RatingListResponse(
        items=[RatingResponse.model_validate(r) for r in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/stats", response_model=RatingStatsResponse)
async def my_rating_stats(
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> RatingStatsResponse:
    """Count, average and distribution on the five-star scale."""
    stats = await rating_service.get_user_rating_stats(session, user.id)
    return RatingStatsResponse(count=stats.count, average=stats.average, distribution=stats.distribution)


@router.get("/{movie_id}", response_model=RatingResponse | None)
async def my_rating_for_movie(
    movie_id: int,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> RatingResponse | None:
    rating = await rating_service.get_user_rating(session, user.id, movie_id)
    return RatingResponse.model_validate(rating) if rating else None


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating(
    movie_id: int,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Response:
    await rating_service.delete_rating(session, user.id, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
