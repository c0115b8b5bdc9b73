from django.contrib import admin
from .models import DietPlan, NutritionTargets


@admin.register(DietPlan)
class DietPlanAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "date", "updated_at")
    list_filter = ("date",)
    search_fields = ("user__name", "user__email")
    raw_id_fields = ("user",)
    ordering = ("-date",)


@admin.register(NutritionTargets)
class NutritionTargetsAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "calories", "protein", "fat", "carbs", "updated_at")
    search_fields = ("user__name", "user__email")
    raw_id_fields = ("user",)
