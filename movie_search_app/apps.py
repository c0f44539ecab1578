from django.apps import AppConfig


class MovieSearchAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "movie_search_app"

    def ready(self):
        from movie_search_app import checks  # noqa: F401
