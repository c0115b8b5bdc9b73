import logging
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.contrib.auth import get_user_model
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.api import (
    get_or_404,
    isoformat,
    json_view,
    parse_id,
    parse_moment,
    read_json,
    require_fields,
    staff_required,
)

from .addons import AVAILABLE_ADDONS
from .models import MembershipAssignment, MembershipPlan
from .services import assign_membership, compute_expiry, price_with_addons


logger = logging.getLogger(__name__)


def _client_total(value):
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


@require_GET
@json_view("Failed to fetch memberships")
def plan_list(request: HttpRequest):
    plans = MembershipPlan.objects.all()
    category = (request.GET.get("category") or "").strip()
    if category:
        plans = plans.filter(category=category)
    return JsonResponse([p.as_dict() for p in plans], safe=False)


@require_GET
@json_view("Failed to fetch membership")
def plan_detail(request: HttpRequest, membership_id):
    plan = get_or_404(MembershipPlan, membership_id, "Membership not found")
    return JsonResponse(plan.as_dict())


@require_GET
def addon_list(request: HttpRequest):
    return JsonResponse([a.as_dict() for a in AVAILABLE_ADDONS], safe=False)


@require_POST
@staff_required
@json_view("Failed to assign membership")
def assign(request: HttpRequest):
    data = read_json(request)
    require_fields(data, "userId", "membershipId", "startDate")

    user_model = get_user_model()
    user = get_or_404(user_model, data["userId"], "User not found")
    plan = get_or_404(MembershipPlan, data["membershipId"], "Membership not found")
    start_date = parse_moment(data["startDate"], "startDate")

    # Expiry and price come from the plan, not from the client.
    expiry_date = compute_expiry(start_date, plan.duration)
    if data.get("expiryDate"):
        claimed = parse_moment(data["expiryDate"], "expiryDate")
        if abs(claimed - expiry_date) >= timedelta(days=1):
            logger.warning(
                "Client expiry %s for plan %s differs from computed %s; using computed",
                claimed.isoformat(),
                plan.pk,
                expiry_date.isoformat(),
            )

    addons = data.get("addons") or []
    total_price = price_with_addons(plan, addons)
    claimed_total = _client_total(data.get("totalPrice"))
    if claimed_total is not None and claimed_total != total_price:
        logger.warning("Client total %s for plan %s differs from computed %s", claimed_total, plan.pk, total_price)

    assigned_by = None
    assigned_by_id = parse_id(data.get("assignedBy"))
    if assigned_by_id:
        assigned_by = user_model.objects.filter(pk=assigned_by_id).first()
    if assigned_by is None:
        assigned_by = request.user

    assignment = assign_membership(
        user=user,
        plan=plan,
        start_date=start_date,
        expiry_date=expiry_date,
        plan_type=str(data.get("planType") or ""),
        assigned_by=assigned_by,
        addons=addons,
        total_price=total_price,
    )
    return JsonResponse({
        "success": True,
        "assignmentId": str(assignment.pk),
        "expiryDate": isoformat(assignment.expiry_date),
        "isExtension": assignment.is_extension,
    })


@require_GET
@staff_required
@json_view("Failed to fetch membership assignments")
def assignment_list(request: HttpRequest):
    rows = MembershipAssignment.objects.all()
    user_id = parse_id(request.GET.get("userId"))
    if user_id:
        rows = rows.filter(user_id=user_id)
    return JsonResponse([a.as_dict() for a in rows[:500]], safe=False)
