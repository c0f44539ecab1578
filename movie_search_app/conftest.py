"""
Pytest fixtures shared by movie_search_app tests.
"""

import copy
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.core.cache import cache

INCEPTION_SEARCH_PAYLOAD = {
    "page": 1,
    "total_pages": 1,
    "total_results": 1,
    "results": [
        {
            "id": 27205,
            "title": "Inception",
            "original_title": "Inception",
            "release_date": "2010-07-15",
            "vote_average": 8.364,
            "poster_path": "/abc.jpg",
        }
    ],
}

INCEPTION_DETAIL_PAYLOAD = {
    "id": 27205,
    "title": "Inception",
    "overview": "Cobb, a skilled thief who commits corporate espionage by infiltrating the subconscious of his targets.",
    "vote_average": 8.364,
    "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Sci-Fi"}],
    "release_date": "2010-07-15",
    "poster_path": "/abc.jpg",
    "credits": {
        "crew": [
            {"job": "Producer", "name": "Emma Thomas", "department": "Production"},
            {"job": "Director", "name": "Christopher Nolan", "department": "Directing"},
        ],
        "cast": [
            {"name": "A", "character": "Cobb", "order": 0},
            {"name": "B", "character": "Arthur", "order": 1},
            {"name": "C", "character": "Ariadne", "order": 2},
            {"name": "D", "character": "Eames", "order": 3},
            {"name": "E", "character": "Saito", "order": 4},
            {"name": "F", "character": "Fischer", "order": 5},
        ],
    },
}


def json_response(payload) -> MagicMock:
    """A requests.Response stand-in returning payload from .json()."""
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def http_error_response(status_code: int, text: str = "") -> MagicMock:
    """A requests.Response stand-in whose raise_for_status fails."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(
        f"{status_code} Error", response=response
    )
    return response


class FakeTMDB:
    """
    Replacement for requests.get that answers TMDB search and detail URLs.

    `search` and `detail` hold either a JSON payload, a prepared response
    mock, or an exception to raise.
    """

    def __init__(self):
        self.search = copy.deepcopy(INCEPTION_SEARCH_PAYLOAD)
        self.detail = copy.deepcopy(INCEPTION_DETAIL_PAYLOAD)
        self.calls: list[tuple[str, dict]] = []
        self.before_request = None

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    def __call__(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        if self.before_request:
            self.before_request(url)

        answer = self.search if url.endswith("/search/movie") else self.detail
        if isinstance(answer, BaseException):
            raise answer
        if isinstance(answer, MagicMock):
            return answer
        return json_response(answer)


@pytest.fixture(autouse=True)
def clear_cache():
    """Search state lives in the cache; start every test from an empty one."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def fake_tmdb():
    """Patch requests.get in the TMDB service with a FakeTMDB."""
    fake = FakeTMDB()
    with patch("movie_search_app.services.tmdb_service.requests.get", side_effect=fake) as mock_get:
        fake.mock_get = mock_get
        yield fake
