from django.urls import include, path

urlpatterns = [
    path("", include("movie_search_app.urls")),
]
