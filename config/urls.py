from django.contrib import admin
from django.urls import path, include
from django.conf import settings

admin.site.site_header = f"{settings.GYM_NAME} admin"
admin.site.site_title = settings.GYM_NAME
admin.site.index_title = "Management"

urlpatterns = [
    path("admin/", admin.site.urls),

    path("api/", include("accounts.urls")),
    path("api/", include("memberships.urls")),
    path("api/", include("reminders.urls")),
    path("api/", include("community.urls")),
    path("api/", include("nutrition.urls")),
]
