"""
TMDB (The Movie Database) API Service

Service for querying movie information from themoviedb.org API.
"""

import logging
import math
from dataclasses import dataclass

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_REQUEST_TIMEOUT = 10


class TMDBServiceError(Exception):
    """Exception raised when TMDB API requests fail."""

    pass


class TMDBConfigurationError(TMDBServiceError):
    """Raised when the TMDB API key is not configured."""

    pass


class TMDBPayloadError(TMDBServiceError):
    """Raised when a TMDB response does not have the expected shape."""

    pass


def _require(data: dict, key: str, expected_type: type | tuple[type, ...], context: str):
    if key not in data or data[key] is None:
        raise TMDBPayloadError(f"TMDB {context} is missing '{key}'")
    value = data[key]
    # bool is an int subclass; a vote average of True is still malformed
    if isinstance(value, bool) or not isinstance(value, expected_type):
        raise TMDBPayloadError(
            f"TMDB {context} field '{key}' has unexpected type {type(value).__name__}"
        )
    return value


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) and value else None


def _text(data: dict, key: str, context: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TMDBPayloadError(
            f"TMDB {context} field '{key}' has unexpected type {type(value).__name__}"
        )
    return value


def _vote_average(data: dict, context: str) -> float:
    value = _require(data, "vote_average", (int, float), context)
    if not math.isfinite(value) or not 0 <= value <= 10:
        raise TMDBPayloadError(f"TMDB {context} field 'vote_average' is out of range: {value!r}")
    return value


@dataclass(frozen=True)
class TMDBGenre:
    """Represents a genre from TMDB API."""

    id: int | None
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "TMDBGenre":
        if not isinstance(data, dict):
            raise TMDBPayloadError("TMDB genre entry is not an object")
        return cls(id=data.get("id"), name=_text(data, "name", "genre"))


@dataclass(frozen=True)
class TMDBCastMember:
    """Represents a cast member (actor) from TMDB API."""

    name: str
    character: str
    order: int | None

    @classmethod
    def from_dict(cls, data: dict) -> "TMDBCastMember":
        if not isinstance(data, dict):
            raise TMDBPayloadError("TMDB cast entry is not an object")
        return cls(
            name=_text(data, "name", "cast entry"),
            character=_text(data, "character", "cast entry"),
            order=data.get("order"),
        )


@dataclass(frozen=True)
class TMDBCrewMember:
    """Represents a crew member from TMDB API."""

    name: str
    job: str
    department: str

    @classmethod
    def from_dict(cls, data: dict) -> "TMDBCrewMember":
        if not isinstance(data, dict):
            raise TMDBPayloadError("TMDB crew entry is not an object")
        return cls(
            name=_text(data, "name", "crew entry"),
            job=_text(data, "job", "crew entry"),
            department=_text(data, "department", "crew entry"),
        )


@dataclass(frozen=True)
class TMDBMovieResult:
    """Represents a movie result from TMDB API search."""

    id: int
    title: str
    original_title: str
    release_date: str | None
    vote_average: float | None
    poster_path: str | None

    @classmethod
    def from_dict(cls, data: dict) -> "TMDBMovieResult":
        if not isinstance(data, dict):
            raise TMDBPayloadError("TMDB search result is not an object")
        vote_average = data.get("vote_average")
        return cls(
            id=_require(data, "id", int, "search result"),
            title=data.get("title") or "",
            original_title=data.get("original_title") or "",
            release_date=_optional_str(data, "release_date"),
            vote_average=vote_average if isinstance(vote_average, (int, float)) else None,
            poster_path=_optional_str(data, "poster_path"),
        )


@dataclass(frozen=True)
class TMDBSearchResponse:
    """Represents a search response from TMDB API."""

    page: int
    total_pages: int
    total_results: int
    results: list[TMDBMovieResult]


@dataclass(frozen=True)
class TMDBMovieDetails:
    """Represents detailed movie information from TMDB API."""

    id: int
    title: str
    overview: str
    release_date: str | None
    vote_average: float
    poster_path: str | None
    genres: list[TMDBGenre]
    cast: list[TMDBCastMember] | None
    crew: list[TMDBCrewMember] | None

    @property
    def directors(self) -> list[TMDBCrewMember]:
        """Get all directors from the crew, in listed order."""
        if not self.crew:
            return []
        return [c for c in self.crew if c.job == "Director"]


class TMDBService:
    """
    Service for interacting with The Movie Database (TMDB) API.

    Requires TMDB_API_KEY to be set in Django settings unless an api_key
    is passed explicitly.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        self.api_key = api_key or getattr(settings, "TMDB_API_KEY", None)
        if not self.api_key:
            raise TMDBConfigurationError(
                "TMDB_API_KEY not configured in settings. "
                "Get your API key from https://www.themoviedb.org/settings/api"
            )
        if timeout is None:
            timeout = getattr(settings, "TMDB_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
        self.timeout = timeout

    def _make_request(self, endpoint: str, params: dict | None = None) -> dict:
        """
        Make a GET request to the TMDB API.

        Args:
            endpoint: API endpoint path (e.g., "/search/movie")
            params: Query parameters, api_key is added automatically

        Returns:
            JSON response as dictionary

        Raises:
            TMDBServiceError: If the request fails
            TMDBPayloadError: If the body is not a JSON object
        """
        url = f"{TMDB_API_BASE_URL}{endpoint}"
        query_params = {"api_key": self.api_key}
        if params:
            query_params.update(params)

        try:
            response = requests.get(
                url,
                params=query_params,
                headers={"accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            logger.error("TMDB API request timed out: %s", url)
            raise TMDBServiceError("TMDB API request timed out")
        except requests.exceptions.HTTPError as e:
            logger.error("TMDB API HTTP error: %s - %s", e.response.status_code, e.response.text)
            raise TMDBServiceError(f"TMDB API error: {e.response.status_code}")
        except requests.exceptions.RequestException as e:
            logger.error("TMDB API request failed: %s", str(e))
            raise TMDBServiceError(f"TMDB API request failed: {str(e)}")

        if not isinstance(data, dict):
            raise TMDBPayloadError(f"TMDB API returned {type(data).__name__} for {endpoint}")
        return data

    def search_movie(
        self,
        query: str,
        language: str | None = None,
        year: int | None = None,
    ) -> TMDBSearchResponse:
        """
        Search for movies by title.

        Args:
            query: Movie title to search for
            language: Language for results (TMDB default when omitted)
            year: Filter by release year (optional)

        Returns:
            TMDBSearchResponse with search results, in TMDB relevance order

        Raises:
            TMDBServiceError: If the search fails
        """
        params: dict[str, str] = {"query": query}
        if language:
            params["language"] = language
        if year:
            params["year"] = str(year)

        logger.info("Searching TMDB for movie: '%s'", query)

        data = self._make_request("/search/movie", params)

        raw_results = data.get("results") or []
        if not isinstance(raw_results, list):
            raise TMDBPayloadError("TMDB search 'results' is not a list")

        logger.debug("TMDB search for '%s' returned %d result(s)", query, len(raw_results))

        results = [TMDBMovieResult.from_dict(movie) for movie in raw_results]

        return TMDBSearchResponse(
            page=data.get("page", 1),
            total_pages=data.get("total_pages", 0),
            total_results=data.get("total_results", len(results)),
            results=results,
        )

    def get_poster_url(self, poster_path: str | None, size: str = "w500") -> str | None:
        """
        Get the full URL for a movie poster.

        Args:
            poster_path: Poster path from movie result
            size: Image size (w92, w154, w185, w342, w500, w780, original)

        Returns:
            Full URL to the poster image, or None if no poster
        """
        if not poster_path:
            return None
        return f"{TMDB_IMAGE_BASE_URL}/{size}{poster_path}"

    def get_movie_details(
        self,
        tmdb_id: int,
        language: str | None = None,
        include_credits: bool = False,
    ) -> TMDBMovieDetails:
        """
        Get detailed information for a specific movie by TMDB ID.

        Args:
            tmdb_id: The TMDB movie ID
            language: Language for results (TMDB default when omitted)
            include_credits: If True, includes cast and crew in single API call

        Returns:
            TMDBMovieDetails with full movie information

        Raises:
            TMDBServiceError: If the request fails
            TMDBPayloadError: If a required field is missing
        """
        params: dict[str, str] = {}
        if language:
            params["language"] = language
        if include_credits:
            params["append_to_response"] = "credits"

        logger.info("Fetching TMDB movie details for ID: %d (credits=%s)", tmdb_id, include_credits)

        data = self._make_request(f"/movie/{tmdb_id}", params)

        genres = [TMDBGenre.from_dict(g) for g in _require(data, "genres", list, "movie details")]

        cast: list[TMDBCastMember] | None = None
        crew: list[TMDBCrewMember] | None = None

        if include_credits:
            credits_data = _require(data, "credits", dict, "movie details")
            cast = [
                TMDBCastMember.from_dict(c)
                for c in _require(credits_data, "cast", list, "movie credits")
            ]
            crew = [
                TMDBCrewMember.from_dict(c)
                for c in _require(credits_data, "crew", list, "movie credits")
            ]

        return TMDBMovieDetails(
            id=_require(data, "id", int, "movie details"),
            title=_text(data, "title", "movie details"),
            overview=_text(data, "overview", "movie details"),
            release_date=_optional_str(data, "release_date"),
            vote_average=_vote_average(data, "movie details"),
            poster_path=_optional_str(data, "poster_path"),
            genres=genres,
            cast=cast,
            crew=crew,
        )
