import json

import httpx
import pytest

from filmmatch.client import ApiClient, ApiClientError, get_base_url, get_timeout


def _client(handler, **kwargs):
    return ApiClient("http://api.test/api", transport=httpx.MockTransport(handler), **kwargs)


class TestConfiguration:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FILMMATCH_API_BASE_URL", raising=False)
        monkeypatch.delenv("FILMMATCH_API_TIMEOUT", raising=False)

        assert get_base_url() == "http://localhost:8000/api"
        assert get_timeout() == 30.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FILMMATCH_API_BASE_URL", "https://films.example.com/api")
        monkeypatch.setenv("FILMMATCH_API_TIMEOUT", "5000")

        assert get_base_url() == "https://films.example.com/api"
        assert get_timeout() == 5.0

    def test_bad_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("FILMMATCH_API_TIMEOUT", "soon")
        assert get_timeout() == 30.0


class TestRequests:
    def test_login_stores_token_for_later_calls(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/api/auth/login":
                return httpx.Response(200, json={"access_token": "tok-123", "user": {"username": "ana"}})
            return httpx.Response(200, json=[])

        with _client(handler) as api:
            api.login("ana", "secret-password")
            api.discover(5)

        login, discover = seen
        assert json.loads(login.content) == {"identifier": "ana", "password": "secret-password"}
        assert "authorization" not in login.headers
        assert discover.headers["authorization"] == "Bearer tok-123"
        assert discover.url.params["limit"] == "5"

    def test_error_response_raises_with_detail(self):
        def handler(request):
            return httpx.Response(404, json={"error": "not_found", "detail": "Movie not found"})

        with _client(handler, token="tok") as api:
            with pytest.raises(ApiClientError) as exc_info:
                api.movie(99)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Movie not found"

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as api:
            with pytest.raises(ApiClientError) as exc_info:
                api.me()
        assert exc_info.value.status_code is None

    def test_delete_returns_none_on_204(self):
        def handler(request):
            assert request.method == "DELETE"
            assert request.url.path == "/api/matches/3"
            return httpx.Response(204)

        with _client(handler, token="tok") as api:
            assert api.delete_match(3) is None

    @pytest.mark.parametrize("stars", [0, 6])
    def test_rate_rejects_out_of_range_stars_without_calling_api(self, stars):
        sent = []

        def handler(request):
            sent.append(request)
            return httpx.Response(201, json={})

        with _client(handler, token="tok") as api:
            with pytest.raises(ApiClientError) as exc_info:
                api.rate(10, stars)

        assert "between 1 and 5" in str(exc_info.value)
        assert sent == []

    def test_rate_converts_stars(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"id": 1})

        with _client(handler, token="tok") as api:
            api.rate(10, 4, "")

        assert bodies == [{"movie_id": 10, "rating": 8, "review": None}]

    def test_matchlist_params(self):
        def handler(request):
            assert dict(request.url.params) == {"page": "2", "limit": "5", "status": "like"}
            return httpx.Response(200, json={"items": []})

        with _client(handler, token="tok") as api:
            api.matchlist("like", page=2, limit=5)

    def test_google_login_requires_credential(self):
        with _client(lambda request: httpx.Response(200)) as api:
            with pytest.raises(ApiClientError):
                api.login_with_google("")
