"""Profiles and discover preferences."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.db import get_session
from filmmatch.schemas import (
    PreferencesResponse,
    PublicUserResponse,
    UpdatePreferencesRequest,
    UpdateUserRequest,
    UserResponse,
)
from filmmatch.security import get_current_user
from filmmatch.services import preferences as preferences_service
from filmmatch.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/preferences", response_model=PreferencesResponse)
async def get_my_preferences(
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> PreferencesResponse:
    prefs = await preferences_service.get_preferences(session, user.id)
    return PreferencesResponse(favorite_genres=prefs.favorite_genres)


@router.put("/me/preferences", response_model=PreferencesResponse)
async def update_my_preferences(
    request: UpdatePreferencesRequest,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> PreferencesResponse:
    """Replace favorite genres; they filter the discover feed by category name."""
    prefs = await preferences_service.update_preferences(
        session,
        user.id,
        favorite_genres=request.favorite_genres,
    )
    return PreferencesResponse(favorite_genres=prefs.favorite_genres)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    request: UpdateUserRequest,
    user: models.User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Partial profile update; send "" for a social URL to clear it."""
    updated = await user_service.update_user(session, user.id, request.changes())
    return UserResponse.model_validate(updated)


@router.get("/{username}", response_model=PublicUserResponse)
async def get_profile(username: str, session: AsyncSession = Depends(get_session)) -> PublicUserResponse:
    user = await user_service.get_user_by_username(session, username)
    return PublicUserResponse.model_validate(user)
