"""Text helpers for category slugs, usernames and search input.

Handles accented genre names ("Ciencia ficción") and free-form search text.
"""
from __future__ import annotations

import re
import unicodedata


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace: collapse multiple spaces, remove leading/trailing."""
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def strip_diacritics(text: str) -> str:
    """Remove combining marks: "Acción" -> "Accion"."""
    text = unicodedata.normalize('NFD', text)
    text = ''.join(c for c in text if unicodedata.category(c) != 'Mn')
    return unicodedata.normalize('NFC', text)


def slugify(text: str, *, max_length: int = 100) -> str:
    """URL-safe slug for a category name.

    >>> slugify("Science Fiction")
    'science-fiction'
    >>> slugify("Acción & Aventura")
    'accion-aventura'
    """
    text = strip_diacritics(text).lower()
    text = re.sub(r'[^a-z0-9]+', '-', text).strip('-')
    return text[:max_length].rstrip('-')


def username_from_email(email: str, *, max_length: int = 40) -> str:
    """Base username for accounts created through Google sign-in."""
    local = email.split('@', 1)[0]
    local = strip_diacritics(local).lower()
    local = re.sub(r'[^a-z0-9_.]+', '', local)
    if len(local) < 3:
        local = f"user{local}"
    return local[:max_length]


def normalize_search_query(query: str | None) -> str | None:
    """Trim and collapse a search term; empty input becomes ``None``."""
    if query is None:
        return None
    query = normalize_whitespace(query)
    return query or None


def escape_like(term: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so ``%`` and ``_`` match literally."""
    for char in (escape, "%", "_"):
        term = term.replace(char, escape + char)
    return term
