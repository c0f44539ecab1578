import pytest

from movie_search_app.services.movie_record import (
    POSTER_PLACEHOLDER_PATH,
    MovieRecord,
    format_rating,
    parse_release_year,
)
from movie_search_app.services.tmdb_service import (
    TMDBCastMember,
    TMDBCrewMember,
    TMDBGenre,
    TMDBMovieDetails,
    TMDBService,
)


def _create_movie_details(
    vote_average: float = 8.364,
    release_date: str | None = "2010-07-15",
    poster_path: str | None = "/abc.jpg",
    genres: list[str] | None = None,
    cast: list[str] | None = None,
    crew: list[tuple[str, str]] | None = None,
) -> TMDBMovieDetails:
    """Helper to create TMDBMovieDetails instances for tests."""
    if genres is None:
        genres = ["Action", "Sci-Fi"]
    if cast is None:
        cast = ["A", "B", "C", "D", "E", "F"]
    if crew is None:
        crew = [("Director", "Christopher Nolan")]
    return TMDBMovieDetails(
        id=27205,
        title="Inception",
        overview="A thief who steals corporate secrets through dream-sharing technology.",
        release_date=release_date,
        vote_average=vote_average,
        poster_path=poster_path,
        genres=[TMDBGenre(id=i, name=name) for i, name in enumerate(genres)],
        cast=[TMDBCastMember(name=name, character="", order=i) for i, name in enumerate(cast)],
        crew=[TMDBCrewMember(name=name, job=job, department="") for job, name in crew],
    )


@pytest.fixture
def tmdb_service():
    return TMDBService(api_key="fake_key")


class TestFormatRating:
    @pytest.mark.parametrize(
        "vote_average, expected",
        [
            (8.364, "8.4"),
            (7.25, "7.3"),
            (7.95, "8.0"),
            (6.05, "6.0"),
            (0, "0.0"),
            (10, "10.0"),
            (7.0, "7.0"),
        ],
    )
    def test_one_decimal_digit(self, vote_average, expected):
        assert format_rating(vote_average) == expected


class TestParseReleaseYear:
    def test_iso_date(self):
        assert parse_release_year("2010-07-15") == 2010

    def test_missing_date(self):
        assert parse_release_year(None) is None
        assert parse_release_year("") is None

    @pytest.mark.parametrize("release_date", ["2010", "2010-07"])
    def test_partial_date(self, release_date):
        assert parse_release_year(release_date) == 2010

    @pytest.mark.parametrize("release_date", ["sometime in 2010", "2010-13", "201", "2010-07-32"])
    def test_invalid_date(self, release_date):
        assert parse_release_year(release_date) is None


class TestFromTmdbDetails:
    def test_inception_scenario(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(), tmdb_service)

        assert record.title == "Inception"
        assert record.rating == "8.4"
        assert record.year == 2010
        assert record.poster == "https://image.tmdb.org/t/p/w500/abc.jpg"
        assert record.director == "Christopher Nolan"
        assert record.cast == "A, B, C, D, E"
        assert record.genres == ("Action", "Sci-Fi")
        assert record.plot.startswith("A thief")

    def test_null_poster_uses_placeholder(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(poster_path=None), tmdb_service)

        assert record.poster == POSTER_PLACEHOLDER_PATH == "/api/placeholder/300/450"

    def test_director_is_first_match_in_crew_order(self, tmdb_service):
        crew = [
            ("Writer", "Someone Else"),
            ("Director", "Lana Wachowski"),
            ("Director", "Lilly Wachowski"),
        ]
        record = MovieRecord.from_tmdb_details(_create_movie_details(crew=crew), tmdb_service)

        assert record.director == "Lana Wachowski"

    def test_director_fallback_when_none(self, tmdb_service):
        crew = [("Co-Director", "Almost"), ("director", "Lowercase"), ("Producer", "Emma Thomas")]
        record = MovieRecord.from_tmdb_details(_create_movie_details(crew=crew), tmdb_service)

        assert record.director == "N/A"

    def test_fewer_than_five_cast_members(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(cast=["X", "Y"]), tmdb_service)

        assert record.cast == "X, Y"

    def test_no_cast(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(cast=[]), tmdb_service)

        assert record.cast == ""

    def test_genres_keep_payload_order(self, tmdb_service):
        genres = ["Thriller", "Action", "Drama", "Crime"]
        record = MovieRecord.from_tmdb_details(_create_movie_details(genres=genres), tmdb_service)

        assert record.genres == ("Thriller", "Action", "Drama", "Crime")

    def test_missing_release_date(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(release_date=None), tmdb_service)

        assert record.year is None

    def test_record_is_immutable(self, tmdb_service):
        record = MovieRecord.from_tmdb_details(_create_movie_details(), tmdb_service)

        with pytest.raises(AttributeError):
            record.title = "Something else"
