from django.conf import settings
from django.db import models


class DietPlan(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="diet_plans")
    date = models.DateField()
    # [{"food": {...per 100 g...}, "quantity": grams, "id": "..."}]
    foods = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-date",)
        constraints = [
            models.UniqueConstraint(fields=["user", "date"], name="uniq_diet_plan_user_date"),
        ]

    def __str__(self):
        return f"DietPlan({self.user_id}) {self.date:%Y-%m-%d}: {len(self.foods or [])} items"


class NutritionTargets(models.Model):
    DEFAULTS = {
        "protein": 150,
        "calories": 2500,
        "fat": 80,
        "carbs": 300,
        "fiber": 25,
        "sugar": 50,
    }

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="nutrition_targets")
    protein = models.FloatField(default=0)
    calories = models.FloatField(default=0)
    fat = models.FloatField(default=0)
    carbs = models.FloatField(default=0)
    fiber = models.FloatField(default=0)
    sugar = models.FloatField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Nutrition targets"

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.DEFAULTS}

    def __str__(self):
        return f"Targets({self.user_id}) {self.calories} kcal"
