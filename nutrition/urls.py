from django.urls import path

from . import views

app_name = "nutrition"
urlpatterns = [
    path("diet/", views.diet, name="diet"),
    path("targets/", views.targets, name="targets"),
    path("foods/", views.foods, name="foods"),
]
