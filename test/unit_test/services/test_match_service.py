"""
Unit tests for the match service.

Covers upserting decisions, the paginated matchlist, stats, deletion and
the discover feed (exclusion, genre filtering, over-fetch and shuffle).
"""

import pytest
from sqlalchemy import func, select

from filmmatch import models
from filmmatch.errors import AppError
from filmmatch.services import match as match_service
from filmmatch.services import preferences as preferences_service

pytestmark = pytest.mark.asyncio

LIKE = models.MatchStatus.LIKE
DISLIKE = models.MatchStatus.DISLIKE
SUPERLIKE = models.MatchStatus.SUPERLIKE


class TestUpsertMatch:
    async def test_creates_match_with_movie(self, session, user, movies):
        movie = movies["The Matrix"]
        match = await match_service.upsert_match(session, user.id, movie.id, LIKE)

        assert match.id is not None
        assert match.status == LIKE
        assert match.movie.title == "The Matrix"
        assert [c.name for c in match.movie.categories] == ["Action", "Science Fiction"]

    async def test_second_swipe_updates_instead_of_duplicating(self, session, user, movies):
        movie = movies["Parasite"]
        first = await match_service.upsert_match(session, user.id, movie.id, DISLIKE)
        second = await match_service.upsert_match(session, user.id, movie.id, SUPERLIKE)

        assert second.id == first.id
        assert second.status == SUPERLIKE
        page = await match_service.get_matchlist(session, user.id)
        assert page.total == 1

    async def test_duplicate_insert_falls_back_to_update(self, session, user, movies, monkeypatch):
        user_id, movie_id = user.id, movies["Parasite"].id
        await match_service.upsert_match(session, user_id, movie_id, DISLIKE)

        real_load = match_service._load_match
        calls = []

        async def miss_first_lookup(*args):
            calls.append(args)
            if len(calls) == 1:
                # Simulates another request inserting between lookup and commit
                return None
            return await real_load(*args)

        monkeypatch.setattr(match_service, "_load_match", miss_first_lookup)

        match = await match_service.upsert_match(session, user_id, movie_id, SUPERLIKE)

        assert len(calls) == 2
        assert match.status == SUPERLIKE
        rows = await session.execute(
            select(func.count(models.UserMatch.id)).where(
                models.UserMatch.user_id == user_id,
                models.UserMatch.movie_id == movie_id,
            )
        )
        assert rows.scalar_one() == 1

    async def test_unknown_movie_is_404(self, session, user, movies):
        with pytest.raises(AppError) as exc_info:
            await match_service.upsert_match(session, user.id, 99999, LIKE)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Movie not found"


class TestMatchlist:
    async def test_filters_by_status_and_paginates(self, session, user, movies):
        titles = ["The Matrix", "Parasite", "Get Out", "Amélie", "Interstellar"]
        statuses = [LIKE, DISLIKE, LIKE, SUPERLIKE, LIKE]
        for title, status in zip(titles, statuses):
            await match_service.upsert_match(session, user.id, movies[title].id, status)

        likes = await match_service.get_matchlist(session, user.id, LIKE, page=1, limit=2)
        assert likes.total == 3
        assert len(likes.items) == 2
        assert likes.total_pages == 2
        assert all(m.status == LIKE for m in likes.items)

        second_page = await match_service.get_matchlist(session, user.id, LIKE, page=2, limit=2)
        assert len(second_page.items) == 1

    async def test_newest_first(self, session, user, movies):
        for title in ["The Matrix", "Parasite", "Get Out"]:
            await match_service.upsert_match(session, user.id, movies[title].id, LIKE)

        page = await match_service.get_matchlist(session, user.id)
        assert [m.movie.title for m in page.items] == ["Get Out", "Parasite", "The Matrix"]

    async def test_empty_matchlist(self, session, user):
        page = await match_service.get_matchlist(session, user.id)
        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 0

    async def test_only_own_matches(self, session, user, other_user, movies):
        await match_service.upsert_match(session, other_user.id, movies["Parasite"].id, LIKE)
        page = await match_service.get_matchlist(session, user.id)
        assert page.total == 0


class TestMatchStatusAndDelete:
    async def test_status_none_before_swipe(self, session, user, movies):
        assert await match_service.get_match_status(session, user.id, movies["The Matrix"].id) is None

    async def test_delete_removes_match(self, session, user, movies):
        movie_id = movies["The Matrix"].id
        await match_service.upsert_match(session, user.id, movie_id, LIKE)

        await match_service.delete_match(session, user.id, movie_id)

        assert await match_service.get_match_status(session, user.id, movie_id) is None

    async def test_delete_missing_is_404(self, session, user, movies):
        with pytest.raises(AppError) as exc_info:
            await match_service.delete_match(session, user.id, movies["The Matrix"].id)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Match not found"


class TestMatchStats:
    async def test_counts_per_status(self, session, user, other_user, movies):
        await match_service.upsert_match(session, user.id, movies["The Matrix"].id, LIKE)
        await match_service.upsert_match(session, user.id, movies["Parasite"].id, LIKE)
        await match_service.upsert_match(session, user.id, movies["Get Out"].id, DISLIKE)
        await match_service.upsert_match(session, user.id, movies["Amélie"].id, SUPERLIKE)
        await match_service.upsert_match(session, other_user.id, movies["Amélie"].id, DISLIKE)

        stats = await match_service.get_match_stats(session, user.id)

        assert (stats.likes, stats.dislikes, stats.superlikes, stats.total) == (2, 1, 1, 4)

    async def test_no_matches(self, session, user):
        stats = await match_service.get_match_stats(session, user.id)
        assert stats.total == 0


class TestDiscover:
    async def test_excludes_already_matched_movies(self, session, user, movies):
        matched = {movies["The Matrix"].id, movies["Parasite"].id, movies["Get Out"].id}
        await match_service.upsert_match(session, user.id, movies["The Matrix"].id, LIKE)
        await match_service.upsert_match(session, user.id, movies["Parasite"].id, DISLIKE)
        await match_service.upsert_match(session, user.id, movies["Get Out"].id, SUPERLIKE)

        feed = await match_service.get_discover_movies(session, user.id, limit=50)

        ids = {m.id for m in feed}
        assert ids.isdisjoint(matched)
        assert len(feed) == len(movies) - 3

    async def test_other_users_matches_do_not_hide_movies(self, session, user, other_user, movies):
        await match_service.upsert_match(session, other_user.id, movies["The Matrix"].id, LIKE)

        feed = await match_service.get_discover_movies(session, user.id, limit=50)

        assert movies["The Matrix"].id in {m.id for m in feed}

    async def test_filters_by_favorite_genres(self, session, user, movies):
        await preferences_service.update_preferences(session, user.id, favorite_genres=["Science Fiction", "Romance"])

        feed = await match_service.get_discover_movies(session, user.id, limit=50)

        assert {m.title for m in feed} == {"The Matrix", "Interstellar", "Amélie"}

    async def test_genre_filter_and_exclusion_combine(self, session, user, movies):
        await preferences_service.update_preferences(session, user.id, favorite_genres=["Science Fiction"])
        await match_service.upsert_match(session, user.id, movies["Interstellar"].id, LIKE)

        feed = await match_service.get_discover_movies(session, user.id, limit=50)

        assert [m.title for m in feed] == ["The Matrix"]

    async def test_corrupt_preferences_fall_back_to_all_movies(self, session, user, movies):
        session.add(models.UserPreferences(user_id=user.id, favorite_genres="not json ["))
        await session.commit()

        feed = await match_service.get_discover_movies(session, user.id, limit=50)

        assert len(feed) == len(movies)

    async def test_respects_limit(self, session, user, movies):
        feed = await match_service.get_discover_movies(session, user.id, limit=3)
        assert len(feed) == 3

    async def test_default_limit_from_settings(self, session, user, movies, monkeypatch):
        from filmmatch.config import settings

        monkeypatch.setattr(settings.discover, "default_limit", 2)
        feed = await match_service.get_discover_movies(session, user.id)
        assert len(feed) == 2

    async def test_overfetches_before_shuffling(self, session, user, movies, monkeypatch):
        from filmmatch.config import settings

        seen_sizes = []
        real_shuffle = match_service.shuffle

        def spy(items, rng=None):
            seen_sizes.append(len(items))
            return real_shuffle(items, rng)

        monkeypatch.setattr(match_service, "shuffle", spy)
        monkeypatch.setattr(settings.discover, "overfetch_factor", 2)

        feed = await match_service.get_discover_movies(session, user.id, limit=3)

        assert seen_sizes == [6]
        assert len(feed) == 3

    async def test_everything_matched_gives_empty_feed(self, session, user, movies):
        for movie in movies.values():
            await match_service.upsert_match(session, user.id, movie.id, DISLIKE)

        assert await match_service.get_discover_movies(session, user.id, limit=10) == []

    async def test_deleted_match_returns_to_feed(self, session, user, movies):
        movie_id = movies["Amélie"].id
        await match_service.upsert_match(session, user.id, movie_id, DISLIKE)
        await match_service.delete_match(session, user.id, movie_id)

        feed = await match_service.get_discover_movies(session, user.id, limit=50)
        assert movie_id in {m.id for m in feed}

    async def test_movies_carry_categories(self, session, user, movies):
        await preferences_service.update_preferences(session, user.id, favorite_genres=["Animation"])
        feed = await match_service.get_discover_movies(session, user.id, limit=5)

        assert len(feed) == 1
        assert {c.slug for c in feed[0].categories} == {"animation", "fantasy"}

