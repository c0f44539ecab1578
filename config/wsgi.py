"""
WSGI config for the movie_search project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()

from movie_search_app.checks import raise_for_serious_errors  # noqa: E402

raise_for_serious_errors()
