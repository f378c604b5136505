"""Pydantic request validators and response models for the REST API."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

from .models import MatchStatus

SOCIAL_URL_MAX_LENGTH = 500  # users.twitter_url / instagram_url column width


# Common
class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: str | None = None


# Users
class UserResponse(BaseModel):
    """The authenticated user's own profile."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    nickname: str | None = None
    bio: str | None = None
    profile_picture: str | None = None
    twitter_url: str | None = None
    instagram_url: str | None = None
    created_at: datetime


class PublicUserResponse(BaseModel):
    """Profile as seen by other users (no email)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    nickname: str | None = None
    bio: str | None = None
    profile_picture: str | None = None
    twitter_url: str | None = None
    instagram_url: str | None = None


class UpdateUserRequest(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""
    username: str | None = Field(default=None, min_length=3, max_length=50)
    nickname: str | None = Field(default=None, min_length=1, max_length=50)
    bio: str | None = Field(default=None, max_length=500)
    profile_picture: str | None = None
    twitter_url: HttpUrl | None = None
    instagram_url: HttpUrl | None = None

    @field_validator("twitter_url", "instagram_url", mode="before")
    @classmethod
    def empty_url_to_none(cls, v):
        # Clearing a social link from a form sends ""
        if isinstance(v, str) and v == "":
            return None
        return v

    @field_validator("twitter_url", "instagram_url")
    @classmethod
    def url_fits_column(cls, v: HttpUrl | None) -> HttpUrl | None:
        if v is not None and len(str(v)) > SOCIAL_URL_MAX_LENGTH:
            raise ValueError(f"URL must be at most {SOCIAL_URL_MAX_LENGTH} characters")
        return v

    def changes(self) -> dict:
        """Fields the client actually sent, URLs as plain strings."""
        data = self.model_dump(exclude_unset=True)
        for key in ("twitter_url", "instagram_url"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return data


class CategorySlugParams(BaseModel):
    """Path parameters for category routes."""
    slug: str = Field(min_length=1)


# Auth
class RegisterRequest(BaseModel):
    """Email/password sign-up."""
    email: EmailStr
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    password: str = Field(min_length=8, max_length=128)
    nickname: str | None = Field(default=None, min_length=1, max_length=50)


class LoginRequest(BaseModel):
    """Password login by email or username."""
    identifier: str = Field(min_length=1, description="Email or username")
    password: str = Field(min_length=1)


class GoogleLoginRequest(BaseModel):
    """Google Sign-In credential (ID token)."""
    credential: str | None = None


class TokenResponse(BaseModel):
    """Bearer token plus the user it was issued for."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


# Catalogue
class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None


class MovieResponse(BaseModel):
    """Movie card data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    overview: str | None = None
    year: int | None = None
    duration: int | None = None
    rating: float | None = None
    director: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    trailer_url: str | None = None
    categories: list[CategoryResponse] = Field(default_factory=list)


class MovieListResponse(BaseModel):
    items: list[MovieResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# Matches
class CreateMatchRequest(BaseModel):
    """Swipe decision."""
    movie_id: int = Field(gt=0)
    status: MatchStatus


class MatchResponse(BaseModel):
    """Stored swipe decision with its movie."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    status: MatchStatus
    created_at: datetime
    updated_at: datetime
    movie: MovieResponse


class MatchlistResponse(BaseModel):
    """Paginated matchlist."""
    items: list[MatchResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class MatchStatsResponse(BaseModel):
    likes: int
    dislikes: int
    superlikes: int
    total: int


# Ratings
class CreateRatingRequest(BaseModel):
    """Score on the 1-10 scale with an optional review."""
    movie_id: int = Field(gt=0)
    rating: int = Field(ge=1, le=10)
    review: str | None = Field(default=None, max_length=2000)


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    rating: int
    review: str | None = None
    created_at: datetime
    updated_at: datetime
    movie: MovieResponse


class RatingListResponse(BaseModel):
    items: list[RatingResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class RatingSummaryResponse(BaseModel):
    movie_id: int
    average: float
    count: int


class RatingStatsResponse(BaseModel):
    """Per-user rating stats on the five-star scale."""
    count: int
    average: float
    distribution: dict[int, int]


# Preferences
class PreferencesResponse(BaseModel):
    favorite_genres: list[str] = Field(default_factory=list)


class UpdatePreferencesRequest(BaseModel):
    favorite_genres: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("favorite_genres")
    @classmethod
    def strip_genres(cls, v: list[str]) -> list[str]:
        return [g.strip() for g in v if g and g.strip()]
