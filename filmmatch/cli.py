"""Terminal swipe client.

    filmmatch login <username-or-email>
    filmmatch swipe [--limit N]
    filmmatch stats
"""
from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Callable

from .client import ApiClient, ApiClientError

logger = logging.getLogger(__name__)

TOKEN_FILE = Path(os.environ.get("FILMMATCH_TOKEN_FILE", Path.home() / ".filmmatch_token"))

ACTIONS = {
    "l": "like",
    "s": "superlike",
    "d": "dislike",
}


def load_token() -> str | None:
    token = os.environ.get("FILMMATCH_TOKEN")
    if token:
        return token
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text(encoding="utf-8").strip() or None
    return None


def save_token(token: str) -> None:
    TOKEN_FILE.write_text(token, encoding="utf-8")
    TOKEN_FILE.chmod(0o600)


def format_card(movie: dict) -> str:
    genres = ", ".join(c["name"] for c in movie.get("categories", []))
    header = movie["title"] + (f" ({movie['year']})" if movie.get("year") else "")
    lines = [header, "=" * len(header)]
    if genres:
        lines.append(genres)
    if movie.get("rating") is not None:
        lines.append(f"★ {movie['rating']:.1f}")
    return "\n".join(lines)


def format_details(movie: dict) -> str:
    lines = [format_card(movie)]
    if movie.get("director"):
        lines.append(f"Director: {movie['director']}")
    if movie.get("duration"):
        lines.append(f"Duration: {movie['duration']} min")
    if movie.get("overview"):
        lines.append("")
        lines.append(movie["overview"])
    return "\n".join(lines)


class SwipeSession:
    """Walks a discover deck one card at a time.

    ``l`` like, ``s`` superlike, ``d`` dislike (skip), ``i`` details, ``q`` quit.
    A failed dislike still advances; a failed like stays on the card.
    """

    def __init__(
        self,
        api: ApiClient,
        *,
        prompt: Callable[[str], str] = input,
        out: Callable[[str], None] = print,
    ):
        self.api = api
        self.prompt = prompt
        self.out = out
        self.movies: list[dict] = []
        self.index = 0
        self.matched: list[dict] = []

    @property
    def current(self) -> dict | None:
        return self.movies[self.index] if self.index < len(self.movies) else None

    def load(self, limit: int | None = None) -> None:
        self.movies = self.api.discover(limit)
        self.index = 0

    def advance(self) -> None:
        self.index += 1

    def handle(self, key: str) -> bool:
        """Apply one key press; returns False when the session should end."""
        movie = self.current
        if movie is None or key == "q":
            return False

        if key == "i":
            self.out(format_details(movie))
            return True

        status = ACTIONS.get(key)
        if status is None:
            self.out("Keys: [l]ike  [s]uperlike  [d]islike  [i]nfo  [q]uit")
            return True

        try:
            self.api.create_match(movie["id"], status)
        except ApiClientError as e:
            logger.error(f"Error submitting {status} for movie {movie['id']}: {e}")
            if status == "dislike":
                self.advance()
            else:
                self.out(f"Could not save your {status}, try again.")
            return True

        if status != "dislike":
            self.matched.append(movie)
            self.out(f"It's a match! {movie['title']} was added to your matchlist.")
        self.advance()
        return True

    def run(self, limit: int | None = None) -> int:
        """Interactive loop; returns the number of cards seen."""
        self.load(limit)
        if not self.movies:
            self.out("No movies available. Try changing your favorite genres.")
            return 0

        while self.current is not None:
            self.out("")
            self.out(format_card(self.current))
            key = self.prompt("[l/s/d/i/q] > ").strip().lower()[:1]
            if not self.handle(key):
                break

        seen = self.index
        if self.current is None:
            self.out(f"No more movies to show! You have seen {seen} movies. Run again to load more.")
        return seen


def _cmd_login(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    with ApiClient(args.base_url) as api:
        data = api.login(args.identifier, password)
    save_token(data["access_token"])
    print(f"Logged in as {data['user']['username']}")
    return 0


def _authed_client(args: argparse.Namespace) -> ApiClient:
    token = load_token()
    if not token:
        raise ApiClientError("Not logged in. Run `filmmatch login` first.")
    return ApiClient(args.base_url, token=token)


def _cmd_swipe(args: argparse.Namespace) -> int:
    with _authed_client(args) as api:
        SwipeSession(api).run(args.limit)
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    with _authed_client(args) as api:
        matches = api.match_stats()
        ratings = api.rating_stats()
    print(f"Likes: {matches['likes']}  Superlikes: {matches['superlikes']}  Dislikes: {matches['dislikes']}")
    print(f"Rated: {ratings['count']} movies, average {ratings['average']}★")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filmmatch", description="Swipe through movies from the terminal")
    parser.add_argument("--base-url", default=None, help="API base URL (default: $FILMMATCH_API_BASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="log in and store the token")
    login.add_argument("identifier", help="username or email")
    login.add_argument("--password", default=None)
    login.set_defaults(func=_cmd_login)

    swipe = sub.add_parser("swipe", help="swipe through the discover feed")
    swipe.add_argument("--limit", type=int, default=None)
    swipe.set_defaults(func=_cmd_swipe)

    stats = sub.add_parser("stats", help="show match and rating stats")
    stats.set_defaults(func=_cmd_stats)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return args.func(args)
    except ApiClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print()
        return 130


if __name__ == "__main__":
    sys.exit(main())
