from django.urls import path

from . import views

app_name = "community"
urlpatterns = [
    path("questions/", views.questions, name="questions"),
    path("questions/answer/", views.answer, name="answer"),
    path("questions/like/", views.like, name="like"),
    path("questions/dislike/", views.dislike, name="dislike"),
    path("reviews/", views.reviews, name="reviews"),
]
