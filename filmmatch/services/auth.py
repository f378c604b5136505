"""Account registration, password login and Google sign-in."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmmatch import models
from filmmatch.config import settings
from filmmatch.errors import AppError
from filmmatch.oauth import GoogleIdentity, verify_google_credential
from filmmatch.security import create_access_token, hash_password, verify_password
from filmmatch.services.user import username_taken
from filmmatch.text import username_from_email

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    """Access token for a user."""
    access_token: str
    expires_in: int  # seconds
    user: models.User
    token_type: str = "bearer"


def issue_token(user: models.User) -> IssuedToken:
    minutes = settings.auth.access_token_expire_minutes
    return IssuedToken(
        access_token=create_access_token(user.id, expires_minutes=minutes),
        expires_in=minutes * 60,
        user=user,
    )


async def _find_by_email(session: AsyncSession, email: str) -> models.User | None:
    result = await session.execute(
        select(models.User).where(func.lower(models.User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def register_user(
    session: AsyncSession,
    *,
    email: str,
    username: str,
    password: str,
    nickname: str | None = None,
) -> models.User:
    """Register a new password account.

    Raises:
        AppError: 409 if the email or username already exists
    """
    email = email.lower()
    if await _find_by_email(session, email) is not None:
        raise AppError(f"Email '{email}' is already registered", 409)
    if await username_taken(session, username):
        raise AppError(f"Username '{username}' is already taken", 409)

    user = models.User(
        email=email,
        username=username,
        nickname=nickname or username,
        password_hash=hash_password(password),
        is_active=True,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info(f"Registered new user: {username}")
    return user


async def authenticate(session: AsyncSession, identifier: str, password: str) -> models.User:
    """Check credentials given an email or a username.

    Raises:
        AppError: 401 for unknown users, wrong passwords and inactive accounts
    """
    result = await session.execute(
        select(models.User).where(
            or_(
                func.lower(models.User.username) == identifier.lower(),
                func.lower(models.User.email) == identifier.lower(),
            )
        )
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Authentication failed for '{identifier}'")
        raise AppError("Invalid credentials", 401)

    if not user.is_active:
        logger.warning(f"Authentication failed: user '{identifier}' is inactive")
        raise AppError("Account is disabled", 401)

    logger.info(f"User '{user.username}' authenticated successfully")
    return user


async def _unique_username(session: AsyncSession, email: str) -> str:
    base = username_from_email(email)
    candidate = base
    while await username_taken(session, candidate):
        candidate = f"{base}_{secrets.token_hex(2)}"
    return candidate


async def get_or_create_google_user(session: AsyncSession, identity: GoogleIdentity) -> models.User:
    """Resolve a verified Google identity to a local user.

    Looks up by Google subject first, then links an existing account with
    the same email, and otherwise creates a new passwordless account.
    """
    result = await session.execute(
        select(models.User).where(models.User.google_id == identity.google_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        user = await _find_by_email(session, identity.email)
        if user is not None:
            logger.info(f"Linking Google account to existing user {user.id}")
            user.google_id = identity.google_id
            if not user.profile_picture and identity.picture:
                user.profile_picture = identity.picture

    if user is None:
        username = await _unique_username(session, identity.email)
        user = models.User(
            email=identity.email,
            username=username,
            nickname=(identity.name or username)[:50],
            google_id=identity.google_id,
            profile_picture=identity.picture,
            is_active=True,
        )
        session.add(user)
        logger.info(f"Created user {username} from Google sign-in")

    if not user.is_active:
        raise AppError("Account is disabled", 401)

    await session.commit()
    await session.refresh(user)
    return user


async def login_with_google(session: AsyncSession, credential: str | None) -> models.User:
    """Verify a Google credential and return the matching local user."""
    identity = await verify_google_credential(credential)
    return await get_or_create_google_user(session, identity)
