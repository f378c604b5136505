import pytest
from pydantic import ValidationError

from filmmatch.models import MatchStatus
from filmmatch.schemas import (
    CreateMatchRequest,
    RegisterRequest,
    UpdatePreferencesRequest,
    UpdateUserRequest,
)


class TestUpdateUserRequest:
    def test_changes_only_contains_sent_fields(self):
        request = UpdateUserRequest(bio="Hi")
        assert request.changes() == {"bio": "Hi"}

    def test_urls_become_strings(self):
        request = UpdateUserRequest(twitter_url="https://twitter.com/ana")
        assert request.changes() == {"twitter_url": "https://twitter.com/ana"}

    def test_empty_url_means_clear(self):
        request = UpdateUserRequest(instagram_url="")
        assert request.changes() == {"instagram_url": None}

    def test_rejects_invalid_url(self):
        with pytest.raises(ValidationError):
            UpdateUserRequest(twitter_url="twitter dot com")

    def test_rejects_url_longer_than_column(self):
        with pytest.raises(ValidationError):
            UpdateUserRequest(instagram_url="https://instagram.com/" + "x" * 500)

    def test_rejects_short_username(self):
        with pytest.raises(ValidationError):
            UpdateUserRequest(username="ab")


class TestRegisterRequest:
    def test_valid(self):
        request = RegisterRequest(email="ana@example.com", username="ana_b.1", password="12345678")
        assert request.nickname is None

    @pytest.mark.parametrize("username", ["ab", "with space", "émile", "x" * 51])
    def test_invalid_usernames(self, username):
        with pytest.raises(ValidationError):
            RegisterRequest(email="ana@example.com", username=username, password="12345678")


def test_match_status_parses_from_value():
    request = CreateMatchRequest(movie_id=3, status="superlike")
    assert request.status is MatchStatus.SUPERLIKE


def test_preferences_strip_blank_genres():
    request = UpdatePreferencesRequest(favorite_genres=[" Drama ", "", "  "])
    assert request.favorite_genres == ["Drama"]
