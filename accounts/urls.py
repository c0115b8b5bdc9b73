from django.urls import path

from . import views

app_name = "accounts"
urlpatterns = [
    path("auth/csrf/", views.csrf, name="csrf"),
    path("auth/register/", views.register, name="register"),
    path("auth/login/", views.login_view, name="login"),
    path("auth/logout/", views.logout_view, name="logout"),
    path("user/update/", views.user_update, name="user_update"),
    path("user/<str:user_id>/", views.user_detail, name="user_detail"),
    path("admin/users/", views.admin_users, name="admin_users"),
]
