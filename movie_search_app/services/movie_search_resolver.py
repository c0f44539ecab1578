"""
MovieSearchResolver: turns a title query into a MovieRecord.

Runs the two-step TMDB lookup (search, then details with credits for the
top hit) and records the outcome in a SearchStateStore.
"""

import logging
import time

from movie_search_app.services.movie_record import MovieRecord
from movie_search_app.services.search_state import SearchState, SearchStateStore
from movie_search_app.services.tmdb_service import TMDBService, TMDBServiceError

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No results found"
SEARCH_FAILED_MESSAGE = "An error occurred while searching. Please try again."


class MovieSearchResolver:
    def __init__(self, tmdb_service: TMDBService, store: SearchStateStore):
        self.tmdb_service = tmdb_service
        self.store = store

    def resolve(self, query: str) -> SearchState:
        """
        Resolve a title query into a MovieRecord and store the outcome.

        A blank query changes nothing. Otherwise the state goes to loading,
        and ends with either the new movie, "No results found" (which also
        clears the previous movie), or the generic failure message (which
        keeps the previous movie on screen).

        Every call takes a new sequence number. If another call starts before
        this one finishes, this call's outcome is dropped and the newer call
        owns the state.
        """
        query = query.strip()
        if not query:
            return self.store.load()

        sequence = self.store.next_sequence()
        state = self.store.load().evolve(
            query=query,
            loading=True,
            error=None,
            sequence=sequence,
            loading_started_at=time.time(),
        )
        self.store.save(state)

        try:
            search_response = self.tmdb_service.search_movie(query)
            if not search_response.results:
                logger.info("No TMDB results for '%s'", query)
                return self._finish(sequence, error=NO_RESULTS_MESSAGE, movie=None)

            top_hit = search_response.results[0]
            logger.debug("Using top TMDB hit for '%s': '%s' (id=%d)", query, top_hit.title, top_hit.id)

            details = self.tmdb_service.get_movie_details(top_hit.id, include_credits=True)
            movie = MovieRecord.from_tmdb_details(details, self.tmdb_service)
        except TMDBServiceError:
            logger.exception("Search error for '%s'", query)
            return self._finish(sequence, error=SEARCH_FAILED_MESSAGE)

        return self._finish(sequence, error=None, movie=movie)

    def _finish(self, sequence: int, **changes) -> SearchState:
        current = self.store.load()
        if not self.store.is_current(sequence):
            logger.info(
                "Discarding stale search result (sequence %d, current %d)",
                sequence,
                self.store.current_sequence(),
            )
            return current

        state = current.evolve(loading=False, loading_started_at=None, **changes)
        self.store.save(state)
        return state
