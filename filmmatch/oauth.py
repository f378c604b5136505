"""Google Sign-In credential verification.

The browser SDK hands the client an ID token ("credential"); we verify it
against Google's tokeninfo endpoint and check it was issued for our client.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import settings
from .errors import AppError

logger = logging.getLogger(__name__)

_VALID_ISSUERS = {"accounts.google.com", "https://accounts.google.com"}


@dataclass
class GoogleIdentity:
    """Verified claims from a Google ID token."""
    google_id: str
    email: str
    name: str | None = None
    picture: str | None = None


@retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    reraise=True,
)
async def _fetch_tokeninfo(credential: str) -> httpx.Response:
    async with httpx.AsyncClient(timeout=settings.auth.google_timeout_seconds) as client:
        return await client.get(settings.auth.google_tokeninfo_url, params={"id_token": credential})


async def verify_google_credential(credential: str | None) -> GoogleIdentity:
    """Verify a Google ID token and return the identity it carries.

    Args:
        credential: The ``credential`` field of Google's sign-in response

    Returns:
        GoogleIdentity with subject, email and profile fields

    Raises:
        AppError: 400 if no credential was sent, 401 if Google rejects it or
            it was issued for another client, 502 if Google is unreachable or answers garbage
    """
    if not credential:
        raise AppError("No credential received from Google", 400)

    try:
        response = await _fetch_tokeninfo(credential)
    except httpx.HTTPError as e:
        logger.error(f"Google tokeninfo request failed: {e}")
        raise AppError("Could not reach Google to verify the credential", 502) from e

    if response.status_code != 200:
        logger.warning(f"Google rejected credential: HTTP {response.status_code}")
        raise AppError("Invalid Google credential", 401)

    try:
        claims = response.json()
    except ValueError as e:
        logger.error(f"Google tokeninfo returned a non-JSON body: {e}")
        raise AppError("Unexpected response from Google", 502) from e
    if not isinstance(claims, dict):
        logger.error(f"Google tokeninfo returned {type(claims).__name__}, expected an object")
        raise AppError("Unexpected response from Google", 502)

    expected_aud = settings.auth.google_client_id
    if expected_aud and claims.get("aud") != expected_aud:
        logger.warning(f"Google credential issued for another client: {claims.get('aud')}")
        raise AppError("Google credential was not issued for this application", 401)

    if claims.get("iss") not in _VALID_ISSUERS:
        raise AppError("Invalid Google credential issuer", 401)

    if str(claims.get("email_verified", "")).lower() != "true":
        raise AppError("Google account email is not verified", 401)

    if not claims.get("sub") or not claims.get("email"):
        raise AppError("Google credential is missing the subject or email", 401)

    return GoogleIdentity(
        google_id=claims["sub"],
        email=claims["email"].lower(),
        name=claims.get("name"),
        picture=claims.get("picture"),
    )
