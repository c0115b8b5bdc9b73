import json

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from .foods import FOODS_BY_ID, search_foods
from .models import DietPlan, NutritionTargets
from .services import calculate_totals, save_diet_plan


class TotalsTests(TestCase):
    def test_totals_scale_per_100g_values(self):
        chicken = FOODS_BY_ID["chicken-breast"].as_dict()
        oats = FOODS_BY_ID["oats"].as_dict()
        totals = calculate_totals([
            {"food": chicken, "quantity": 200},
            {"food": oats, "quantity": 50},
        ])
        self.assertEqual(totals, {"protein": 68.5, "calories": 524.5, "fat": 10.7, "carbs": 33.0})

    def test_items_by_food_id_and_garbage_are_tolerated(self):
        totals = calculate_totals([
            {"foodId": "eggs", "quantity": 100},
            {"food": {"protein": "abc"}, "quantity": 100},
            {"food": FOODS_BY_ID["almonds"].as_dict(), "quantity": -30},
            "not-an-item",
        ])
        self.assertEqual(totals, {"protein": 13.0, "calories": 155.0, "fat": 11.0, "carbs": 1.1})

    def test_empty_plan(self):
        self.assertEqual(calculate_totals([]), {"protein": 0.0, "calories": 0.0, "fat": 0.0, "carbs": 0.0})


class FoodSearchTests(TestCase):
    def test_category_and_text_filters(self):
        self.assertEqual(len(search_foods()), 10)
        self.assertEqual(len(search_foods("All")), 10)
        self.assertTrue(all(f.category == "Fats" for f in search_foods("Fats")))
        self.assertEqual([f.id for f in search_foods(search="RICE")], ["brown-rice"])

    def test_foods_endpoint(self):
        body = self.client.get(reverse("nutrition:foods"), {"category": "Protein"}).json()
        self.assertEqual(body["categories"], ["All", "Protein", "Carbohydrates", "Fats"])
        self.assertEqual(len(body["foods"]), 5)


class DietPlanTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="arjun", email="arjun@example.com", password="x")

    def _post(self, foods):
        payload = {"userId": str(self.user.pk), "dietPlan": foods}
        return self.client.post(reverse("nutrition:diet"), data=json.dumps(payload), content_type="application/json")

    def test_one_plan_per_user_and_day(self):
        item = {"food": FOODS_BY_ID["oats"].as_dict(), "quantity": 100}

        first = self._post([item])
        self.assertEqual(first.json()["dietId"], str(DietPlan.objects.get().pk))

        second = self._post([item, item])
        self.assertEqual(second.json()["dietId"], "updated")
        self.assertEqual(DietPlan.objects.count(), 1)
        self.assertEqual(len(DietPlan.objects.get().foods), 2)

        body = self.client.get(reverse("nutrition:diet"), {"userId": self.user.pk}).json()
        self.assertEqual(body["date"], timezone.localdate().isoformat())
        self.assertEqual(body["totals"]["carbs"], 132.0)
        self.assertIn("lastUpdated", body)

    def test_missing_day_returns_empty_plan(self):
        body = self.client.get(reverse("nutrition:diet"), {"userId": self.user.pk, "date": "2020-01-01"}).json()
        self.assertEqual(body["dietPlan"], [])
        self.assertEqual(body["message"], "No diet plan found for this date")

    def test_bad_input(self):
        response = self.client.get(reverse("nutrition:diet"), {"userId": self.user.pk, "date": "yesterday"})
        self.assertEqual(response.status_code, 400)

        response = self.client.get(reverse("nutrition:diet"))
        self.assertEqual(response.json()["error"], "User ID required")

        with self.assertRaises(ValidationError):
            save_diet_plan(user=self.user, foods={"oats": 100})


class TargetsTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="zoya", email="zoya@example.com", password="x")
        self.url = reverse("nutrition:targets")

    def test_defaults_until_saved(self):
        body = self.client.get(self.url, {"userId": self.user.pk}).json()
        self.assertEqual(body, NutritionTargets.DEFAULTS)

    def test_save_and_read_back(self):
        payload = {"userId": str(self.user.pk), "targets": {"protein": 120, "calories": "2100"}}
        response = self.client.post(self.url, data=json.dumps(payload), content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["userId"], str(self.user.pk))

        body = self.client.get(self.url, {"userId": self.user.pk}).json()
        self.assertEqual(body["protein"], 120)
        self.assertEqual(body["calories"], 2100)
        self.assertEqual(body["fiber"], 0)

    def test_targets_are_required(self):
        payload = {"userId": str(self.user.pk)}
        response = self.client.post(self.url, data=json.dumps(payload), content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Targets data is required")
