"""Domain error raised by services and rendered by the API."""
from __future__ import annotations


class AppError(Exception):
    """Error with an HTTP status code attached.

    Services raise it for expected failures (missing movie, duplicate
    username, bad credentials); the API turns it into an ``ErrorResponse``.
    """

    def __init__(self, message: str, status_code: int = 400, *, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error or _default_error_slug(status_code)

    def __repr__(self) -> str:
        return f"AppError(status_code={self.status_code}, message={self.message!r})"


def _default_error_slug(status_code: int) -> str:
    return {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        409: "conflict",
        422: "validation_error",
        502: "upstream_error",
    }.get(status_code, "app_error")
