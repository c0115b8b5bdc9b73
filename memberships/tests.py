import json
from datetime import datetime, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from .models import MembershipAssignment, MembershipPlan
from .services import (
    assign_membership,
    compute_expiry,
    extension_days,
    normalize_addons,
    plan_type_for,
    price_with_addons,
    resolve_expiry,
)


def aware(*args):
    return timezone.make_aware(datetime(*args), timezone.get_current_timezone())


class ExpiryMathTests(TestCase):
    def test_compute_expiry_adds_calendar_months(self):
        self.assertEqual(compute_expiry(aware(2024, 5, 20), 1), aware(2024, 6, 20))
        self.assertEqual(compute_expiry(aware(2024, 11, 15), 3), aware(2025, 2, 15))

    def test_compute_expiry_clamps_to_month_end(self):
        self.assertEqual(compute_expiry(aware(2024, 1, 31), 1), aware(2024, 2, 29))
        self.assertEqual(compute_expiry(aware(2023, 1, 31), 1), aware(2023, 2, 28))

    def test_extension_days_rounds_partial_days_up(self):
        start = aware(2024, 5, 20)
        self.assertEqual(extension_days(start, aware(2024, 6, 20)), 31)
        self.assertEqual(extension_days(start, aware(2024, 6, 20, 1)), 32)

    def test_running_membership_is_extended_by_purchase_span(self):
        final, is_extension = resolve_expiry(
            current_expiry=aware(2024, 6, 1),
            start_date=aware(2024, 5, 20),
            candidate_expiry=aware(2024, 6, 20),
            now=aware(2024, 5, 15),
        )
        self.assertEqual(final, aware(2024, 7, 2))
        self.assertTrue(is_extension)

    def test_lapsed_membership_takes_candidate_expiry(self):
        final, is_extension = resolve_expiry(
            current_expiry=aware(2024, 6, 1),
            start_date=aware(2024, 6, 10),
            candidate_expiry=aware(2024, 7, 10),
            now=aware(2024, 6, 5),
        )
        self.assertEqual(final, aware(2024, 7, 10))
        self.assertFalse(is_extension)

    def test_first_membership_takes_candidate_expiry(self):
        final, is_extension = resolve_expiry(
            current_expiry=None,
            start_date=aware(2024, 6, 10),
            candidate_expiry=aware(2024, 7, 10),
            now=aware(2024, 6, 5),
        )
        self.assertEqual(final, aware(2024, 7, 10))
        self.assertFalse(is_extension)

    def test_plan_type_follows_duration(self):
        self.assertEqual(plan_type_for(1), "monthly")
        self.assertEqual(plan_type_for(6), "monthly")
        self.assertEqual(plan_type_for(12), "yearly")


class AddonPricingTests(TestCase):
    def setUp(self):
        self.plan = MembershipPlan.objects.create(name="Workout Plan - Monthly", duration=1, price=Decimal("1000"))

    def test_addons_are_added_to_plan_price(self):
        total = price_with_addons(self.plan, ["personal-training", "diet-plan"])
        self.assertEqual(total, Decimal("2500.00"))

    def test_duplicate_addons_count_once(self):
        self.assertEqual(normalize_addons(["diet-plan", "diet-plan", ""]), ["diet-plan"])
        self.assertEqual(price_with_addons(self.plan, ["diet-plan", "diet-plan"]), Decimal("2000.00"))

    def test_unknown_addon_is_rejected(self):
        with self.assertRaises(ValidationError):
            normalize_addons(["sauna"])


class AssignMembershipServiceTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.user = user_model.objects.create_user(username="member", email="member@example.com", password="pass12345")
        self.plan = MembershipPlan.objects.create(name="Workout Plan - Quarterly", duration=3, price=Decimal("2600"))

    def test_fresh_assignment_updates_user_and_writes_record(self):
        start = timezone.now()
        assignment = assign_membership(user=self.user, plan=self.plan, start_date=start, addons=["supplements"])

        self.user.refresh_from_db()
        self.assertEqual(self.user.membership_plan_id, self.plan.pk)
        self.assertEqual(self.user.membership_type, "monthly")
        self.assertEqual(self.user.membership_start_date, start)
        self.assertEqual(self.user.membership_expiry, compute_expiry(start, 3))
        self.assertTrue(self.user.has_active_membership())

        self.assertFalse(assignment.is_extension)
        self.assertEqual(assignment.expiry_date, self.user.membership_expiry)
        self.assertEqual(assignment.total_price, Decimal("3600.00"))
        self.assertEqual(assignment.addons, ["supplements"])

    def test_second_assignment_extends_running_membership(self):
        current = timezone.now() + timedelta(days=10)
        self.user.membership_expiry = current
        self.user.save(update_fields=["membership_expiry"])

        start = timezone.now()
        candidate = compute_expiry(start, 3)
        assignment = assign_membership(user=self.user, plan=self.plan, start_date=start)

        self.user.refresh_from_db()
        expected = current + timedelta(days=extension_days(start, candidate))
        self.assertTrue(assignment.is_extension)
        self.assertEqual(self.user.membership_expiry, expected)
        self.assertEqual(assignment.expiry_date, expected)

    def test_expiry_before_start_is_rejected(self):
        start = timezone.now()
        with self.assertRaises(ValidationError):
            assign_membership(user=self.user, plan=self.plan, start_date=start, expiry_date=start - timedelta(days=1))
        self.assertEqual(MembershipAssignment.objects.count(), 0)


class AssignMembershipApiTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.staff = user_model.objects.create_user(
            username="staff", email="staff@example.com", password="pass12345", is_staff=True
        )
        self.member = user_model.objects.create_user(username="member", email="member@example.com", password="pass12345")
        self.plan = MembershipPlan.objects.create(
            name="Workout Plan - Yearly",
            duration=12,
            price=Decimal("9600"),
            category=MembershipPlan.Category.WORKOUT,
        )
        self.url = reverse("memberships:assign")

    def _post(self, payload):
        return self.client.post(self.url, data=json.dumps(payload), content_type="application/json")

    def test_staff_can_assign(self):
        self.client.force_login(self.staff)
        response = self._post({
            "userId": str(self.member.pk),
            "membershipId": str(self.plan.pk),
            "startDate": "2030-01-15",
            # client-side numbers are only cross-checked
            "expiryDate": "2031-06-01",
            "totalPrice": 1,
            "addons": ["diet-plan"],
        })
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertFalse(body["isExtension"])

        assignment = MembershipAssignment.objects.get(pk=int(body["assignmentId"]))
        self.assertEqual(assignment.plan_type, "yearly")
        self.assertEqual(assignment.assigned_by, self.staff)
        self.assertEqual(assignment.total_price, Decimal("10600.00"))
        self.assertEqual(assignment.expiry_date, aware(2031, 1, 15))

        self.member.refresh_from_db()
        self.assertEqual(self.member.membership_expiry, aware(2031, 1, 15))

    def test_missing_fields_return_400(self):
        self.client.force_login(self.staff)
        response = self._post({"userId": str(self.member.pk)})
        self.assertEqual(response.status_code, 400)
        self.assertIn("membershipId", response.json()["error"])

    def test_unknown_user_and_plan_return_404(self):
        self.client.force_login(self.staff)
        response = self._post({"userId": "999999", "membershipId": str(self.plan.pk), "startDate": "2030-01-15"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "User not found")

        response = self._post({"userId": str(self.member.pk), "membershipId": "999999", "startDate": "2030-01-15"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Membership not found")

    def test_non_staff_is_forbidden(self):
        self.client.force_login(self.member)
        response = self._post({
            "userId": str(self.member.pk),
            "membershipId": str(self.plan.pk),
            "startDate": "2030-01-15",
        })
        self.assertEqual(response.status_code, 403)
        self.assertEqual(MembershipAssignment.objects.count(), 0)

    def test_assignment_history_can_be_filtered_by_user(self):
        assign_membership(user=self.member, plan=self.plan, start_date=timezone.now())
        self.client.force_login(self.staff)

        response = self.client.get(reverse("memberships:assignment_list"), {"userId": self.member.pk})
        self.assertEqual(response.status_code, 200)
        rows = response.json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["userId"], str(self.member.pk))


class PlanCatalogApiTests(TestCase):
    def setUp(self):
        MembershipPlan.objects.create(
            name="Workout Plan - Monthly", duration=1, price=Decimal("1000"), category=MembershipPlan.Category.WORKOUT
        )
        self.cardio = MembershipPlan.objects.create(
            name="Gym + Cardio Plan - Monthly",
            duration=1,
            price=Decimal("1400"),
            category=MembershipPlan.Category.GYM_CARDIO,
        )

    def test_plan_list_filters_by_category(self):
        response = self.client.get(reverse("memberships:plan_list"), {"category": "gym-cardio"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.json()], [str(self.cardio.pk)])

    def test_plan_detail(self):
        response = self.client.get(reverse("memberships:plan_detail", args=[self.cardio.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["price"], 1400.0)

        response = self.client.get(reverse("memberships:plan_detail", args=["nope"]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Membership not found")

    def test_addon_catalog(self):
        response = self.client.get(reverse("memberships:addon_list"))
        ids = [a["id"] for a in response.json()]
        self.assertEqual(ids, ["personal-training", "diet-plan", "supplements"])
