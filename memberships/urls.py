from django.urls import path

from . import views

app_name = "memberships"
urlpatterns = [
    path("admin/memberships/", views.plan_list, name="plan_list"),
    path("admin/membership-addons/", views.addon_list, name="addon_list"),
    path("admin/assign-membership/", views.assign, name="assign"),
    path("admin/membership-assignments/", views.assignment_list, name="assignment_list"),
    path("memberships/<str:membership_id>/", views.plan_detail, name="plan_detail"),
]
