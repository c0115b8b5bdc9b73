from django.urls import path

from . import views

app_name = "reminders"
urlpatterns = [
    path("admin/reminders/", views.admin_reminders, name="admin_reminders"),
    path("admin/broadcast-reminders/", views.admin_broadcast_reminders, name="admin_broadcast_reminders"),
    path("admin/send-reminder/", views.send_reminder, name="send_reminder"),
    path("broadcast-reminders/<str:reminder_id>/", views.broadcast_detail, name="broadcast_detail"),
    path("reminders/", views.reminders, name="reminders"),
    path("reminders/mark-read/", views.reminder_mark_read, name="mark_read"),
    path("reminders/<str:reminder_id>/", views.reminder_detail, name="reminder_detail"),
]
