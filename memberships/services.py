from __future__ import annotations

import logging
import math
from calendar import monthrange
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from core.telegram_notify import notify_membership_assigned

from .addons import ADDONS_BY_ID
from .models import MembershipAssignment, MembershipPlan


logger = logging.getLogger(__name__)

MONEY = Decimal("0.01")
SECONDS_PER_DAY = 24 * 60 * 60
YEARLY_FROM_MONTHS = 12


def _money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(MONEY, rounding=ROUND_HALF_UP)


def _add_months(dt, months: int):
    idx = (dt.month - 1) + months
    year = dt.year + (idx // 12)
    month = (idx % 12) + 1
    day = min(dt.day, monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def compute_expiry(start_date: datetime, duration_months: int) -> datetime:
    """Expiry of a plan bought on start_date, by calendar months."""
    return _add_months(start_date, int(duration_months))


def plan_type_for(duration_months: int) -> str:
    return "yearly" if int(duration_months or 0) >= YEARLY_FROM_MONTHS else "monthly"


def normalize_addons(addon_ids) -> list[str]:
    if not addon_ids:
        return []
    if isinstance(addon_ids, str):
        addon_ids = [addon_ids]

    cleaned = []
    for raw in addon_ids:
        addon_id = str(raw).strip()
        if not addon_id:
            continue
        if addon_id not in ADDONS_BY_ID:
            raise ValidationError(f"Unknown add-on: {addon_id}")
        if addon_id not in cleaned:
            cleaned.append(addon_id)
    return cleaned


def price_with_addons(plan: MembershipPlan, addon_ids) -> Decimal:
    total = _money(plan.price)
    for addon_id in normalize_addons(addon_ids):
        total += ADDONS_BY_ID[addon_id].price
    return _money(total)


def extension_days(start_date: datetime, candidate_expiry: datetime) -> int:
    """Whole days the purchase covers; partial days count as a full day."""
    seconds = (candidate_expiry - start_date).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def resolve_expiry(*, current_expiry, start_date, candidate_expiry, now=None) -> tuple[datetime, bool]:
    """Return (final_expiry, is_extension).

    A membership that is still running is extended by the span of the new
    purchase; otherwise the candidate expiry stands.
    """
    now = now or timezone.now()
    if current_expiry is None or current_expiry <= now:
        return candidate_expiry, False

    days = extension_days(start_date, candidate_expiry)
    return current_expiry + timedelta(days=days), True


@transaction.atomic
def assign_membership(
    *,
    user,
    plan: MembershipPlan,
    start_date: datetime,
    expiry_date: datetime | None = None,
    plan_type: str = "",
    assigned_by=None,
    addons=None,
    total_price=None,
) -> MembershipAssignment:
    if expiry_date is None:
        expiry_date = compute_expiry(start_date, plan.duration)
    if expiry_date <= start_date:
        raise ValidationError("expiryDate must be after startDate")

    addon_ids = normalize_addons(addons)
    price = _money(total_price) if total_price is not None else price_with_addons(plan, addon_ids)
    plan_type = (plan_type or "").strip() or plan_type_for(plan.duration)

    # Row lock: concurrent assignments to the same member must not both read the old expiry.
    user = get_user_model().objects.select_for_update().get(pk=user.pk)

    final_expiry, is_extension = resolve_expiry(
        current_expiry=user.membership_expiry,
        start_date=start_date,
        candidate_expiry=expiry_date,
    )

    user.membership_plan = plan
    user.membership_type = plan_type
    user.membership_start_date = start_date
    user.membership_expiry = final_expiry
    user.save(update_fields=[
        "membership_plan",
        "membership_type",
        "membership_start_date",
        "membership_expiry",
    ])

    assignment = MembershipAssignment.objects.create(
        user=user,
        membership_plan=plan,
        plan_type=plan_type,
        start_date=start_date,
        expiry_date=final_expiry,
        assigned_by=assigned_by,
        is_extension=is_extension,
        addons=addon_ids,
        total_price=price,
    )
    logger.info(
        "Membership %s assigned to user %s until %s (extension=%s)",
        plan.pk,
        user.pk,
        final_expiry.isoformat(),
        is_extension,
    )

    notify_membership_assigned(
        user=user,
        plan_name=plan.name,
        expiry_date=final_expiry,
        is_extension=is_extension,
        total_price=price,
    )
    return assignment
