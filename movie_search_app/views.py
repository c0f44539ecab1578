import logging

from django.http import HttpResponse
from django.middleware.csrf import get_token
from django.shortcuts import redirect
from django.utils.html import escape, format_html
from django.views.decorators.http import require_GET, require_http_methods

from movie_search_app.services.movie_search_resolver import SEARCH_FAILED_MESSAGE, MovieSearchResolver
from movie_search_app.services.search_state import SearchState, SearchStateStore
from movie_search_app.services.tmdb_service import TMDBConfigurationError, TMDBService

logger = logging.getLogger(__name__)


@require_http_methods(["GET", "POST"])
def movie_search(request):
    """Search page. POST runs a search, GET renders the stored state."""
    store = SearchStateStore.for_session(request.session)

    if request.method == "POST":
        query = request.POST.get("query", "")
        try:
            tmdb_service = TMDBService()
        except TMDBConfigurationError:
            logger.error("Search attempted without a TMDB API key")
            if query.strip():
                store.save(store.load().evolve(query=query.strip(), loading=False, error=SEARCH_FAILED_MESSAGE))
            return redirect("movie_search")
        MovieSearchResolver(tmdb_service, store).resolve(query)
        return redirect("movie_search")

    return HttpResponse(render_search_page(store.load(), get_token(request)))


@require_GET
def poster_placeholder(request, width, height):
    """Grey SVG used when a movie has no poster."""
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">
    <rect width="100%" height="100%" fill="#ddd"/>
    <text x="50%" y="50%" fill="#999" font-family="sans-serif" font-size="{max(width, height) // 10}" text-anchor="middle" dominant-baseline="middle">{width} x {height}</text>
</svg>"""
    return HttpResponse(svg, content_type="image/svg+xml")


def _render_search_form(state: SearchState, csrf_token: str) -> str:
    button_label = "Searching..." if state.loading else "Search"
    disabled = " disabled" if state.loading else ""
    return format_html(
        """
        <form method="post" class="search-form" id="search-form">
            <input type="hidden" name="csrfmiddlewaretoken" value="{}">
            <input type="text" name="query" placeholder="Search for a movie..." value="{}" autofocus>
            <button type="submit" id="search-button"{}>{}</button>
        </form>
        """,
        csrf_token,
        state.query,
        disabled,
        button_label,
    )


def _render_error(state: SearchState) -> str:
    return format_html('<div class="alert" role="alert">{}</div>', state.error)


def _render_movie(state: SearchState) -> str:
    movie = state.movie
    year_str = f" ({movie.year})" if movie.year is not None else ""

    return f"""
    <div class="movie">
        <div class="poster-column">
            <img class="poster" src="{escape(movie.poster)}" alt="{escape(movie.title)}">
        </div>
        <div class="details-column">
            <h2>{escape(movie.title)}{year_str}<span class="rating">★ {escape(movie.rating)}</span></h2>
            <p class="plot">{escape(movie.plot)}</p>
            <div class="facts">
                <div class="genres"><strong>Genres:</strong> {escape(", ".join(movie.genres))}</div>
                <div class="director"><strong>Director:</strong> {escape(movie.director)}</div>
            </div>
            <div class="cast"><strong>Cast:</strong> {escape(movie.cast)}</div>
        </div>
    </div>
    """


def render_search_page(state: SearchState, csrf_token: str) -> str:
    """Render the whole page from the search state."""
    error_html = _render_error(state) if state.error else ""
    # A failed search leaves the previous movie on screen below the alert
    movie_html = _render_movie(state) if state.movie and not state.loading else ""

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <title>Movie Search</title>
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, sans-serif; margin: 0; background: #f0f0f0; color: #333; }}
            .container {{ max-width: 1100px; margin: 0 auto; padding: 24px; }}
            h1 {{ font-size: 30px; margin: 0 0 16px 0; }}
            .search-form {{ display: flex; gap: 8px; margin-bottom: 32px; }}
            .search-form input {{ flex: 1; padding: 8px 16px; border: 1px solid #ccc; border-radius: 8px; font-size: 16px; }}
            .search-form button {{ padding: 8px 16px; background: #3b82f6; color: #fff; border: none; border-radius: 8px; font-size: 16px; cursor: pointer; }}
            .search-form button:hover {{ background: #2563eb; }}
            .search-form button:disabled {{ background: #93c5fd; cursor: default; }}
            .alert {{ background: #fef2f2; border: 1px solid #fca5a5; color: #b91c1c; padding: 12px 16px; border-radius: 8px; }}
            .movie {{ display: grid; grid-template-columns: 1fr 2fr; gap: 24px; }}
            .poster {{ width: 100%; border-radius: 8px; box-shadow: 0 4px 8px rgba(0,0,0,0.2); }}
            .details-column h2 {{ font-size: 24px; margin: 0 0 16px 0; }}
            .rating {{ margin-left: 8px; color: #eab308; }}
            .plot {{ margin-bottom: 16px; line-height: 1.5; }}
            .facts {{ display: grid; grid-template-columns: 1fr 1fr; gap: 16px; }}
            .cast {{ margin-top: 16px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1>Movie Search</h1>
            {_render_search_form(state, csrf_token)}
            {error_html}
            {movie_html}
        </div>
        <script>
            document.getElementById("search-form").addEventListener("submit", function (event) {{
                var query = event.target.elements.query.value.trim();
                var button = document.getElementById("search-button");
                if (!query || button.disabled) {{
                    event.preventDefault();
                    return;
                }}
                button.disabled = true;
                button.textContent = "Searching...";
            }});
        </script>
    </body>
    </html>
    """
