"""Core SQLAlchemy models (2.x style) for the FilmMatch schema.

Users, the movie catalogue with its categories, and the per-user
decisions (matches), ratings and preferences.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class MatchStatus(str, enum.Enum):
    """A swipe decision."""
    LIKE = "like"
    DISLIKE = "dislike"
    SUPERLIKE = "superlike"


movie_categories = Table(
    "movie_categories",
    Base.metadata,
    Column("movie_id", ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Application users (password or Google accounts)."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    nickname: Mapped[str | None] = mapped_column(String(50))
    password_hash: Mapped[str | None] = mapped_column(String(255))
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    bio: Mapped[str | None] = mapped_column(String(500))
    profile_picture: Mapped[str | None] = mapped_column(Text)
    twitter_url: Mapped[str | None] = mapped_column(String(500))
    instagram_url: Mapped[str | None] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    matches: Mapped[list[UserMatch]] = relationship("UserMatch", back_populates="user", passive_deletes=True)
    ratings: Mapped[list[UserRating]] = relationship("UserRating", back_populates="user", passive_deletes=True)
    preferences: Mapped[UserPreferences | None] = relationship(
        "UserPreferences",
        back_populates="user",
        uselist=False,
        passive_deletes=True,
    )


class Category(Base):
    """Movie genres."""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    movies: Mapped[list[Movie]] = relationship(
        "Movie",
        secondary=movie_categories,
        back_populates="categories",
    )


class Movie(Base):
    """Movie catalogue."""
    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    overview: Mapped[str | None] = mapped_column(Text)
    year: Mapped[int | None] = mapped_column(Integer, index=True)
    duration: Mapped[int | None] = mapped_column(Integer)  # minutes
    rating: Mapped[float | None] = mapped_column(Float)  # external score, 0-10
    director: Mapped[str | None] = mapped_column(String(255))
    poster_url: Mapped[str | None] = mapped_column(String(500))
    backdrop_url: Mapped[str | None] = mapped_column(String(500))
    trailer_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Categories are always needed when a movie is rendered
    categories: Mapped[list[Category]] = relationship(
        "Category",
        secondary=movie_categories,
        back_populates="movies",
        lazy="selectin",
        order_by="Category.name",
    )
    matches: Mapped[list[UserMatch]] = relationship("UserMatch", back_populates="movie", passive_deletes=True)


class UserMatch(Base):
    """One swipe decision per (user, movie)."""
    __tablename__ = "user_matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[MatchStatus] = mapped_column(
        Enum(
            MatchStatus,
            name="match_status",
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="matches")
    movie: Mapped[Movie] = relationship("Movie", back_populates="matches", lazy="selectin")

    __table_args__ = (
        Index("ix_user_matches_user_movie", "user_id", "movie_id", unique=True),
        Index("ix_user_matches_user_status", "user_id", "status"),
        Index("ix_user_matches_user_created", "user_id", "created_at"),
    )


class UserRating(Base):
    """A 1-10 score with an optional review, one per (user, movie)."""
    __tablename__ = "user_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    review: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="ratings")
    movie: Mapped[Movie] = relationship("Movie", lazy="selectin")

    __table_args__ = (
        Index("ix_user_ratings_user_movie", "user_id", "movie_id", unique=True),
    )


class UserPreferences(Base):
    """Discover preferences. ``favorite_genres`` holds a JSON-encoded list of category names."""
    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    favorite_genres: Mapped[str | None] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    user: Mapped[User] = relationship("User", back_populates="preferences")
