from django.contrib import admin
from .models import MembershipAssignment, MembershipPlan


@admin.register(MembershipPlan)
class MembershipPlanAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "category",
        "duration",
        "price",
        "price_per_month",
        "badge",
        "created_at",
    )
    list_filter = ("category", "duration")
    search_fields = ("name", "description")
    ordering = ("category", "duration")


@admin.register(MembershipAssignment)
class MembershipAssignmentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "membership_plan",
        "plan_type",
        "start_date",
        "expiry_date",
        "is_extension",
        "total_price",
        "assigned_by",
        "assigned_at",
    )
    list_filter = ("plan_type", "is_extension")
    search_fields = ("user__name", "user__email", "membership_plan__name")
    ordering = ("-assigned_at",)

    def has_change_permission(self, request, obj=None):
        return False
