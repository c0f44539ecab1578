"""
System checks for movie_search_app configuration.

Run on startup by runserver and explicitly by ``python manage.py check``.
WSGI servers never run them, so ``config/wsgi.py`` calls
``raise_for_serious_errors`` itself.
"""

from django.conf import settings
from django.core.checks import Error, register, run_checks
from django.core.exceptions import ImproperlyConfigured


@register()
def check_tmdb_api_key(app_configs, **kwargs):
    """The TMDB API key must be configured before the site can search."""
    if getattr(settings, "TMDB_API_KEY", None):
        return []
    return [
        Error(
            "TMDB_API_KEY is not configured.",
            hint="Set the TMDB_API_KEY environment variable. "
            "Get your API key from https://www.themoviedb.org/settings/api",
            id="movie_search_app.E001",
        )
    ]


def raise_for_serious_errors():
    errors = [
        message
        for message in run_checks()
        if message.is_serious() and not message.is_silenced()
    ]
    if errors:
        raise ImproperlyConfigured("\n".join(str(error) for error in errors))
