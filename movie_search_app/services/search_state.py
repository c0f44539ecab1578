"""
Per-session search state and its cache-backed store.
"""

import time
from dataclasses import dataclass, replace

from django.conf import settings
from django.core.cache import BaseCache, cache

from movie_search_app.services.movie_record import MovieRecord

DEFAULT_STATE_TIMEOUT = 60 * 60 * 24
# A search still marked loading after this many seconds was abandoned mid-request
DEFAULT_LOADING_TIMEOUT = 30
CACHE_KEY_PREFIX = "movie_search"


@dataclass(frozen=True)
class SearchState:
    """What the search page renders from."""

    query: str = ""
    loading: bool = False
    error: str | None = None
    movie: MovieRecord | None = None
    sequence: int = 0
    loading_started_at: float | None = None

    def evolve(self, **changes) -> "SearchState":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "loading": self.loading,
            "error": self.error,
            "movie": self.movie.to_dict() if self.movie else None,
            "sequence": self.sequence,
            "loading_started_at": self.loading_started_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SearchState":
        movie = data.get("movie")
        return cls(
            query=data.get("query", ""),
            loading=data.get("loading", False),
            error=data.get("error"),
            movie=MovieRecord.from_dict(movie) if movie else None,
            sequence=data.get("sequence", 0),
            loading_started_at=data.get("loading_started_at"),
        )


@dataclass
class SearchStateStore:
    """
    Stores one SearchState under a key in the Django cache.

    Alongside the state, a counter key holds the sequence number of the most
    recently started resolution. The counter is bumped with cache.incr, which
    is atomic on every backend Django ships.
    """

    key: str
    backend: BaseCache | None = None
    timeout: int | None = None
    loading_timeout: float = DEFAULT_LOADING_TIMEOUT

    def __post_init__(self):
        if self.backend is None:
            self.backend = cache
        if self.timeout is None:
            self.timeout = getattr(settings, "SEARCH_STATE_TIMEOUT", DEFAULT_STATE_TIMEOUT)

    @classmethod
    def for_session(cls, session) -> "SearchStateStore":
        """Build the store for a request session, creating the session if needed."""
        if not session.session_key:
            session.create()
        return cls(key=f"{CACHE_KEY_PREFIX}:{session.session_key}")

    @property
    def state_key(self) -> str:
        return f"{self.key}:state"

    @property
    def sequence_key(self) -> str:
        return f"{self.key}:sequence"

    def load(self) -> SearchState:
        data = self.backend.get(self.state_key)
        if data is None:
            return SearchState()
        state = SearchState.from_dict(data)
        if state.loading and self._loading_expired(state):
            return state.evolve(loading=False, loading_started_at=None)
        return state

    def _loading_expired(self, state: SearchState) -> bool:
        if state.loading_started_at is None:
            return True
        return time.time() - state.loading_started_at > self.loading_timeout

    def save(self, state: SearchState) -> None:
        self.backend.set(self.state_key, state.to_dict(), self.timeout)

    def next_sequence(self) -> int:
        """Claim the next sequence number for a new resolution."""
        self.backend.add(self.sequence_key, 0, self.timeout)
        try:
            return self.backend.incr(self.sequence_key)
        except ValueError:
            # Counter expired between add() and incr()
            self.backend.add(self.sequence_key, 0, self.timeout)
            return self.backend.incr(self.sequence_key)

    def current_sequence(self) -> int:
        return self.backend.get(self.sequence_key, 0)

    def is_current(self, sequence: int) -> bool:
        return self.current_sequence() == sequence
