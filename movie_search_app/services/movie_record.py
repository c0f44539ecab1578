"""
Display record built from a TMDB movie details payload.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from movie_search_app.services.tmdb_service import TMDBMovieDetails, TMDBService

POSTER_PLACEHOLDER_PATH = "/api/placeholder/300/450"
POSTER_SIZE = "w500"
MAX_CAST_MEMBERS = 5
DIRECTOR_FALLBACK = "N/A"
PARTIAL_DATE_FORMATS = ("%Y-%m", "%Y")


def format_rating(vote_average: float) -> str:
    """
    Format a vote average with exactly one decimal digit.

    Rounds the exact binary value of the float, with exact ties going up
    (7.25 -> "7.3", 7.95 -> "8.0").
    """
    return str(Decimal(vote_average).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_release_year(release_date: str | None) -> int | None:
    """Extract the year from an ISO release date ("YYYY-MM-DD", "YYYY-MM" or "YYYY")."""
    if not release_date:
        return None
    try:
        return datetime.date.fromisoformat(release_date).year
    except ValueError:
        pass
    for date_format in PARTIAL_DATE_FORMATS:
        try:
            return datetime.datetime.strptime(release_date, date_format).year
        except ValueError:
            continue
    return None


@dataclass(frozen=True)
class MovieRecord:
    """UI-ready movie data shown on the search page."""

    title: str
    plot: str
    rating: str
    genres: tuple[str, ...]
    year: int | None
    poster: str
    director: str
    cast: str

    @classmethod
    def from_tmdb_details(cls, details: TMDBMovieDetails, tmdb_service: TMDBService) -> MovieRecord:
        """
        Project a TMDB details payload (fetched with credits) into a MovieRecord.

        The director is the first crew entry with job "Director"; the cast is
        the first five billed names in payload order.
        """
        directors = details.directors
        cast_members = details.cast or []

        return cls(
            title=details.title,
            plot=details.overview,
            rating=format_rating(details.vote_average),
            genres=tuple(g.name for g in details.genres),
            year=parse_release_year(details.release_date),
            poster=tmdb_service.get_poster_url(details.poster_path, size=POSTER_SIZE)
            or POSTER_PLACEHOLDER_PATH,
            director=directors[0].name if directors else DIRECTOR_FALLBACK,
            cast=", ".join(c.name for c in cast_members[:MAX_CAST_MEMBERS]),
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "plot": self.plot,
            "rating": self.rating,
            "genres": list(self.genres),
            "year": self.year,
            "poster": self.poster,
            "director": self.director,
            "cast": self.cast,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MovieRecord:
        return cls(
            title=data["title"],
            plot=data["plot"],
            rating=data["rating"],
            genres=tuple(data["genres"]),
            year=data["year"],
            poster=data["poster"],
            director=data["director"],
            cast=data["cast"],
        )
