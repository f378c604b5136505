import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test configuration before importing the app (settings are cached on import)
os.environ["DB_URL"] = TEST_DATABASE_URL
os.environ["AUTH_JWT_SECRET"] = "test-secret-key-not-for-production"
os.environ["AUTH_GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["LOG_FORMAT"] = "text"

from filmmatch import models  # noqa: E402
from filmmatch.security import create_access_token  # noqa: E402
from filmmatch.services import auth as auth_service  # noqa: E402
from filmmatch.services import movie as movie_service  # noqa: E402

CATALOGUE = [
    ("The Matrix", 1999, ["Action", "Science Fiction"]),
    ("Spirited Away", 2001, ["Animation", "Fantasy"]),
    ("Parasite", 2019, ["Drama", "Thriller"]),
    ("The Godfather", 1972, ["Crime", "Drama"]),
    ("Mad Max: Fury Road", 2015, ["Action", "Adventure"]),
    ("Amélie", 2001, ["Comedy", "Romance"]),
    ("Get Out", 2017, ["Horror", "Thriller"]),
    ("Interstellar", 2014, ["Drama", "Science Fiction"]),
]


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the test session injected."""
    from filmmatch.api import app
    from filmmatch.db import get_session

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def movies(session: AsyncSession) -> dict[str, models.Movie]:
    """Seeded catalogue keyed by title."""
    created = {}
    for title, year, genres in CATALOGUE:
        created[title] = await movie_service.create_movie(
            session,
            title=title,
            year=year,
            rating=8.0,
            category_names=genres,
        )
    await session.commit()
    return created


@pytest_asyncio.fixture
async def user(session: AsyncSession) -> models.User:
    return await auth_service.register_user(
        session,
        email="ana@example.com",
        username="ana",
        password="correct-horse-battery",
        nickname="Ana",
    )


@pytest_asyncio.fixture
async def other_user(session: AsyncSession) -> models.User:
    return await auth_service.register_user(
        session,
        email="ben@example.com",
        username="ben",
        password="another-long-password",
    )


@pytest.fixture
def auth_headers(user: models.User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
