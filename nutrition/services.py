from __future__ import annotations

import math
from datetime import date

from django.core.exceptions import ValidationError
from django.utils import timezone

from .foods import FOODS_BY_ID
from .models import DietPlan, NutritionTargets


TOTAL_KEYS = ("protein", "calories", "fat", "carbs")


def _number(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _item_food(item: dict) -> dict:
    food = item.get("food")
    if isinstance(food, dict):
        return food
    known = FOODS_BY_ID.get(str(item.get("foodId") or ""))
    return known.as_dict() if known else {}


def calculate_totals(foods) -> dict:
    """Sum per-100 g values scaled by each item's quantity in grams."""
    totals = {key: 0.0 for key in TOTAL_KEYS}
    for item in foods or []:
        if not isinstance(item, dict):
            continue
        multiplier = max(_number(item.get("quantity")), 0.0) / 100
        food = _item_food(item)
        for key in TOTAL_KEYS:
            totals[key] += _number(food.get(key)) * multiplier
    return {key: round(value, 1) for key, value in totals.items()}


def save_diet_plan(*, user, foods, day: date | None = None) -> tuple[DietPlan, bool]:
    if not isinstance(foods, list):
        raise ValidationError("Diet plan is required and must be an array")
    return DietPlan.objects.update_or_create(
        user=user,
        date=day or timezone.localdate(),
        defaults={"foods": foods},
    )


def get_diet_plan(*, user_id: int, day: date) -> DietPlan | None:
    return DietPlan.objects.filter(user_id=user_id, date=day).first()


def save_targets(*, user, targets: dict) -> NutritionTargets:
    if not isinstance(targets, dict):
        raise ValidationError("Targets data is required")
    values = {name: _number(targets.get(name)) for name in NutritionTargets.DEFAULTS}
    obj, _ = NutritionTargets.objects.update_or_create(user=user, defaults=values)
    return obj


def get_targets(*, user_id: int) -> dict:
    obj = NutritionTargets.objects.filter(user_id=user_id).first()
    if obj is None:
        return dict(NutritionTargets.DEFAULTS)
    return obj.as_dict()
