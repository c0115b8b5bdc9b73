import logging

from django.contrib.auth import get_user_model
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_http_methods

from core.api import get_or_404, isoformat, json_error, json_view, parse_id, read_json, require_fields

from .foods import FOOD_CATEGORIES, search_foods
from .services import calculate_totals, get_diet_plan, get_targets, save_diet_plan, save_targets


logger = logging.getLogger(__name__)


def _query_user_id(request: HttpRequest):
    return parse_id(request.GET.get("userId"))


@require_http_methods(["GET", "POST"])
@json_view("Failed to process diet plan")
def diet(request: HttpRequest):
    if request.method == "GET":
        user_id = _query_user_id(request)
        if not user_id:
            return json_error("User ID required", status=400)

        raw_date = (request.GET.get("date") or "").strip()
        try:
            day = parse_date(raw_date) if raw_date else timezone.localdate()
        except ValueError:
            day = None
        if day is None:
            return json_error("date must be YYYY-MM-DD", status=400)

        plan = get_diet_plan(user_id=user_id, day=day)
        if plan is None:
            return JsonResponse({
                "success": True,
                "dietPlan": [],
                "date": day.isoformat(),
                "totals": calculate_totals([]),
                "message": "No diet plan found for this date",
            })
        return JsonResponse({
            "success": True,
            "dietPlan": plan.foods or [],
            "date": plan.date.isoformat(),
            "totals": calculate_totals(plan.foods),
            "lastUpdated": isoformat(plan.updated_at),
        })

    data = read_json(request)
    require_fields(data, "userId", message="User ID is required")
    user = get_or_404(get_user_model(), data["userId"], "User not found")

    plan, created = save_diet_plan(user=user, foods=data.get("dietPlan"))
    logger.info("Diet plan %s for user %s on %s (%s items)", plan.pk, user.pk, plan.date, len(plan.foods))
    return JsonResponse({
        "success": True,
        "dietId": str(plan.pk) if created else "updated",
        "message": "Diet plan saved successfully",
    })


@require_http_methods(["GET", "POST"])
@json_view("Failed to process targets")
def targets(request: HttpRequest):
    if request.method == "GET":
        user_id = _query_user_id(request)
        if not user_id:
            return json_error("User ID required", status=400)
        return JsonResponse(get_targets(user_id=user_id))

    data = read_json(request)
    require_fields(data, "userId", message="User ID is required")
    require_fields(data, "targets", message="Targets data is required")
    user = get_or_404(get_user_model(), data["userId"], "User not found")

    obj = save_targets(user=user, targets=data["targets"])
    return JsonResponse({
        "success": True,
        "message": "Targets saved successfully",
        "data": {"userId": str(user.pk), **obj.as_dict(), "updatedAt": isoformat(obj.updated_at)},
    })


@require_GET
def foods(request: HttpRequest):
    rows = search_foods(request.GET.get("category", ""), request.GET.get("search", ""))
    return JsonResponse({
        "categories": ["All", *FOOD_CATEGORIES],
        "foods": [f.as_dict() for f in rows],
    })
