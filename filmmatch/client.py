"""HTTP client for the FilmMatch API.

Configuration:
- base URL: ``FILMMATCH_API_BASE_URL`` (default ``http://localhost:8000/api``)
- timeout: ``FILMMATCH_API_TIMEOUT`` in milliseconds (default 30000)
- auth: JWT bearer token in the ``Authorization`` header, no cookies
"""
from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from .services.rating import STAR_SCALE, stars_to_score

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_MS = 30000


class ApiClientError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def get_base_url() -> str:
    return os.environ.get("FILMMATCH_API_BASE_URL") or DEFAULT_BASE_URL


def get_timeout() -> float:
    """Timeout in seconds from the millisecond env setting."""
    raw = os.environ.get("FILMMATCH_API_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_MS / 1000
    try:
        return float(raw) / 1000
    except ValueError:
        logger.warning(f"Invalid FILMMATCH_API_TIMEOUT {raw!r}, using {DEFAULT_TIMEOUT_MS}ms")
        return DEFAULT_TIMEOUT_MS / 1000


class ApiClient:
    """Thin synchronous wrapper over ``httpx.Client``.

    Usage:
        with ApiClient() as api:
            api.login("ana", "secret-password")
            for movie in api.discover():
                ...
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or get_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_timeout()
        self.token = token
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )
        logger.debug(f"API client initialized: base_url={self.base_url} timeout={self.timeout}s")

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise ApiClientError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            try:
                body = response.json()
                detail = body.get("detail", body) if isinstance(body, dict) else body
            except ValueError:
                detail = response.text
            raise ApiClientError(
                f"{method} {path} -> HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
                detail=detail,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth
    def _store_token(self, data: dict) -> dict:
        self.token = data["access_token"]
        return data

    def login(self, identifier: str, password: str) -> dict:
        return self._store_token(self._request("POST", "/auth/login", json={"identifier": identifier, "password": password}))

    def login_with_google(self, credential: str) -> dict:
        if not credential:
            raise ApiClientError("No credential received from Google")
        return self._store_token(self._request("POST", "/auth/google", json={"credential": credential}))

    def register(self, email: str, username: str, password: str, nickname: str | None = None) -> dict:
        payload = {"email": email, "username": username, "password": password, "nickname": nickname}
        return self._store_token(self._request("POST", "/auth/register", json=payload))

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    # Movies
    def movie(self, movie_id: int) -> dict:
        return self._request("GET", f"/movies/{movie_id}")

    # Matches
    def discover(self, limit: int | None = None) -> list[dict]:
        params = {"limit": limit} if limit else None
        return self._request("GET", "/matches/discover", params=params)

    def create_match(self, movie_id: int, status: str) -> dict:
        return self._request("POST", "/matches", json={"movie_id": movie_id, "status": status})

    def delete_match(self, movie_id: int) -> None:
        self._request("DELETE", f"/matches/{movie_id}")

    def matchlist(self, status: str | None = None, page: int = 1, limit: int = 20) -> dict:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self._request("GET", "/matches", params=params)

    def match_stats(self) -> dict:
        return self._request("GET", "/matches/stats")

    # Ratings
    def rate(self, movie_id: int, stars: int, comment: str | None = None) -> dict:
        """Rate on the five-star scale; the API stores ``stars * 2``."""
        if not 1 <= stars <= STAR_SCALE:
            raise ApiClientError(f"stars must be between 1 and {STAR_SCALE}")
        payload = {"movie_id": movie_id, "rating": stars_to_score(stars), "review": comment or None}
        return self._request("POST", "/ratings", json=payload)

    def ratings(self, page: int = 1, limit: int = 20) -> dict:
        return self._request("GET", "/ratings", params={"page": page, "limit": limit})

    def rating_stats(self) -> dict:
        return self._request("GET", "/ratings/stats")
