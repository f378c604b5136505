"""Swipe decisions and the discover feed."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.config import settings
from filmmatch.db import get_session
from filmmatch.schemas import (
    CreateMatchRequest,
    MatchlistResponse,
    MatchResponse,
    MatchStatsResponse,
    MovieResponse,
)
from filmmatch.security import get_current_user
from filmmatch.services import match as match_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["matches"])


@router.post(
    "",
    response_model=MatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Movie not found"}},
)
async def create_match(
    request: CreateMatchRequest,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MatchResponse:
    """Like, dislike or superlike a movie.

    Swiping the same movie again replaces the previous decision.
    """
    match = await match_service.upsert_match(session, user.id, request.movie_id, request.status)
    return MatchResponse.model_validate(match)


@router.get("", response_model=MatchlistResponse)
async def get_matchlist(
    status_filter: models.MatchStatus | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MatchlistResponse:
    """The user's matchlist, newest first."""
    result = await match_service.get_matchlist(session, user.id, status_filter, page, limit)
    return MatchlistResponse(
        items=[MatchResponse.model_validate(m) for m in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/discover", response_model=list[MovieResponse])
async def discover(
    limit: int | None = Query(default=None, ge=1, le=settings.discover.max_limit),
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> list[MovieResponse]:
    """Movies the user has not swiped yet, in random order.

    Restricted to the user's favorite genres when they have set any.
    """
    movies = await match_service.get_discover_movies(session, user.id, limit)
    logger.info(f"Discover for user {user.id}: returning {len(movies)} movies")
    return [MovieResponse.model_validate(m) for m in movies]


@router.get("/stats", response_model=MatchStatsResponse)
async def match_stats(
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MatchStatsResponse:
    stats = await match_service.get_match_stats(session, user.id)
    return MatchStatsResponse(
        likes=stats.likes,
        dislikes=stats.dislikes,
        superlikes=stats.superlikes,
        total=stats.total,
    )


@router.get("/{movie_id}", response_model=MatchResponse | None)
async def match_status(
    movie_id: int,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> MatchResponse | None:
    """The user's decision for a movie, ``null`` if not swiped yet."""
    match = await match_service.get_match_status(session, user.id, movie_id)
    return MatchResponse.model_validate(match) if match else None


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Match not found"}},
)
async def delete_match(
    movie_id: int,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Response:
    """Undo a swipe so the movie can appear in discover again."""
    await match_service.delete_match(session, user.id, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
