from django.urls import path

from movie_search_app import views

urlpatterns = [
    path("", views.movie_search, name="movie_search"),
    path("api/placeholder/<int:width>/<int:height>", views.poster_placeholder, name="poster_placeholder"),
]
