from django.contrib import admin
from .models import BroadcastReminder, Reminder


@admin.register(BroadcastReminder)
class BroadcastReminderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "type",
        "priority",
        "user_count",
        "created_by_name",
        "sent_at",
        "expiry_date",
    )
    list_filter = ("type", "priority")
    search_fields = ("message", "created_by_name")
    ordering = ("-created_at",)


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "type",
        "priority",
        "read",
        "broadcast",
        "sent_at",
        "expiry_date",
    )
    list_filter = ("type", "priority", "read")
    search_fields = ("user__name", "user__email", "message")
    raw_id_fields = ("user", "broadcast")
    ordering = ("-created_at",)
