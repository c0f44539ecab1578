"""
Search TMDB for a movie and print its details, the same way the search page does.

Usage:
    python manage.py search_movie "Inception"
    python manage.py search_movie "Dune" --year 2021
    python manage.py search_movie "Amélie" --language fr-FR
"""

import uuid

from django.core.management.base import BaseCommand, CommandError

from movie_search_app.services.movie_search_resolver import MovieSearchResolver
from movie_search_app.services.search_state import SearchStateStore
from movie_search_app.services.tmdb_service import TMDBService, TMDBServiceError


class FilteredTMDBService(TMDBService):
    """TMDBService that pins a language and year filter on every lookup."""

    def __init__(self, language: str | None, year: int | None):
        super().__init__()
        self.language = language
        self.year = year

    def search_movie(self, query, language=None, year=None):
        return super().search_movie(query, language=language or self.language, year=year or self.year)

    def get_movie_details(self, tmdb_id, language=None, include_credits=False):
        return super().get_movie_details(
            tmdb_id, language=language or self.language, include_credits=include_credits
        )


class Command(BaseCommand):
    help = "Search TMDB (The Movie Database) for a movie and show its details"

    def add_arguments(self, parser):
        parser.add_argument(
            "movie_name",
            type=str,
            help="The movie title to search for",
        )
        parser.add_argument(
            "--year",
            type=int,
            help="Filter by release year",
        )
        parser.add_argument(
            "--language",
            type=str,
            help="Language for results (TMDB default when omitted)",
        )

    def handle(self, *args, **options):
        movie_name = options["movie_name"]
        year = options["year"]
        language = options["language"]

        if not movie_name.strip():
            raise CommandError("Movie name must not be blank.")

        self.stdout.write(f"Searching TMDB for: '{movie_name.strip()}'")
        if year:
            self.stdout.write(f"  Year filter: {year}")
        if language:
            self.stdout.write(f"  Language: {language}")
        self.stdout.write("")

        try:
            service = FilteredTMDBService(language=language, year=year)
        except TMDBServiceError as e:
            raise CommandError(str(e))

        # One state per run; runs may overlap on a shared cache
        store = SearchStateStore(key=f"movie_search:management_command:{uuid.uuid4().hex}")
        state = MovieSearchResolver(service, store).resolve(movie_name)

        if state.error:
            raise CommandError(state.error)

        movie = state.movie
        if movie is None:
            raise CommandError(f"Search for '{movie_name.strip()}' did not finish.")
        year_str = f" ({movie.year})" if movie.year is not None else ""
        self.stdout.write(self.style.SUCCESS(f"{movie.title}{year_str}  ★ {movie.rating}"))
        self.stdout.write(f"  Genres: {', '.join(movie.genres)}")
        self.stdout.write(f"  Director: {movie.director}")
        self.stdout.write(f"  Cast: {movie.cast}")
        self.stdout.write(f"  Poster: {movie.poster}")
        if movie.plot:
            self.stdout.write(f"  Plot: {movie.plot}")
