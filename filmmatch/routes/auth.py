"""Registration, login and Google sign-in."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.db import get_session
from filmmatch.schemas import (
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from filmmatch.security import get_current_user
from filmmatch.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: models.User) -> TokenResponse:
    issued = auth_service.issue_token(user)
    return TokenResponse(
        access_token=issued.access_token,
        token_type=issued.token_type,
        expires_in=issued.expires_in,
        user=UserResponse.model_validate(issued.user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, session: AsyncSession = Depends(get_session)) -> TokenResponse:
    user = await auth_service.register_user(
        session,
        email=request.email,
        username=request.username,
        password=request.password,
        nickname=request.nickname,
    )
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, session: AsyncSession = Depends(get_session)) -> TokenResponse:
    user = await auth_service.authenticate(session, request.identifier, request.password)
    return _token_response(user)


@router.post("/google", response_model=TokenResponse)
async def google_login(request: GoogleLoginRequest, session: AsyncSession = Depends(get_session)) -> TokenResponse:
    """Exchange a Google Sign-In credential for an API token."""
    user = await auth_service.login_with_google(session, request.credential)
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(user: models.User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)
