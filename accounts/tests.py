import json
from datetime import date, timedelta

from django.contrib.auth import get_user_model
from django.test import Client, TestCase
from django.urls import reverse
from django.utils import timezone


class RegisterTests(TestCase):
    url = "accounts:register"

    def _post(self, payload):
        return self.client.post(reverse(self.url), data=json.dumps(payload), content_type="application/json")

    def test_register_creates_user_with_profile(self):
        response = self._post({
            "name": "Priya Sharma",
            "email": " Priya@Example.com ",
            "password": "secret123",
            "phone": "+91 9000000000",
            "goals": ["Weight Loss"],
            "weight": "62.5",
        })
        self.assertEqual(response.status_code, 200)
        user = response.json()["user"]
        self.assertEqual(user["email"], "priya@example.com")
        self.assertEqual(user["username"], "priya")
        self.assertEqual(user["experienceLevel"], "Beginner")
        self.assertEqual(user["weight"], 62.5)
        self.assertEqual(user["role"], "user")
        self.assertIsNone(user["membershipExpiry"])
        self.assertNotIn("password", user)

        created = get_user_model().objects.get(email="priya@example.com")
        self.assertTrue(created.check_password("secret123"))

    def test_age_is_derived_from_date_of_birth(self):
        today = timezone.localdate()
        dob = date(today.year - 30, 1, 1)
        response = self._post({
            "name": "Old Timer",
            "email": "old@example.com",
            "password": "secret123",
            "dateOfBirth": dob.isoformat(),
        })
        self.assertEqual(response.json()["user"]["age"], 30)

    def test_missing_fields_are_rejected(self):
        response = self._post({"email": "a@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["error"],
            "Missing required fields: email, password, and name are required",
        )

    def test_duplicate_email_is_rejected(self):
        self._post({"name": "A", "email": "dup@example.com", "password": "x"})
        response = self._post({"name": "B", "email": "DUP@example.com", "password": "y"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Email already registered")

    def test_username_collision_gets_suffix(self):
        self._post({"name": "A", "email": "sam@example.com", "password": "x"})
        response = self._post({"name": "B", "email": "sam@example.org", "password": "y"})
        self.assertEqual(response.json()["user"]["username"], "sam-2")


class LoginTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="ravi", email="ravi@example.com", password="pass12345", name="Ravi"
        )

    def _login(self, payload):
        return self.client.post(reverse("accounts:login"), data=json.dumps(payload), content_type="application/json")

    def test_login_by_email_starts_session(self):
        response = self._login({"email": "RAVI@example.com", "password": "pass12345"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["id"], str(self.user.pk))
        self.assertEqual(int(self.client.session["_auth_user_id"]), self.user.pk)

    def test_login_by_username(self):
        response = self._login({"email": "ravi", "password": "pass12345"})
        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self._login({"email": "ravi@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Invalid email or password")

    def test_missing_credentials(self):
        response = self._login({"email": "ravi@example.com"})
        self.assertEqual(response.status_code, 400)


class ProfileTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.user = user_model.objects.create_user(
            username="meera", email="meera@example.com", password="pass12345", name="Meera"
        )
        self.other = user_model.objects.create_user(username="other", email="other@example.com", password="pass12345")
        self.staff = user_model.objects.create_user(
            username="staff", email="staff@example.com", password="pass12345", is_staff=True
        )

    def _update(self, payload):
        return self.client.put(reverse("accounts:user_update"), data=json.dumps(payload), content_type="application/json")

    def test_owner_updates_whitelisted_fields_only(self):
        self.client.force_login(self.user)
        response = self._update({
            "userId": str(self.user.pk),
            "height": 165,
            "goals": ["Flexibility"],
            "role": "admin",
            "membershipExpiry": "2099-01-01",
        })
        self.assertEqual(response.status_code, 200)

        self.user.refresh_from_db()
        self.assertEqual(self.user.height, 165)
        self.assertEqual(self.user.goals, ["Flexibility"])
        self.assertEqual(self.user.role, "user")
        self.assertIsNone(self.user.membership_expiry)

    def test_other_member_is_forbidden(self):
        self.client.force_login(self.other)
        response = self._update({"userId": str(self.user.pk), "name": "Hacked"})
        self.assertEqual(response.status_code, 403)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Meera")

    def test_staff_can_update_anyone(self):
        self.client.force_login(self.staff)
        response = self._update({"userId": str(self.user.pk), "phone": "+91 9111111111"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["phone"], "+91 9111111111")

    def test_empty_name_is_rejected(self):
        self.client.force_login(self.user)
        response = self._update({"userId": str(self.user.pk), "name": "  "})
        self.assertEqual(response.status_code, 400)

    def test_user_id_is_required(self):
        self.client.force_login(self.user)
        response = self._update({"name": "X"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "User ID is required")

    def test_user_detail(self):
        url = reverse("accounts:user_detail", args=[self.user.pk])
        self.assertEqual(self.client.get(url).status_code, 403)

        self.client.force_login(self.user)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["email"], "meera@example.com")

    def test_admin_user_list_is_staff_only(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.get(reverse("accounts:admin_users")).status_code, 403)

        self.client.force_login(self.staff)
        response = self.client.get(reverse("accounts:admin_users"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 3)


class UserModelTests(TestCase):
    def test_membership_state(self):
        now = timezone.now()
        user = get_user_model()(username="x", email="x@example.com")
        self.assertFalse(user.has_active_membership(now))
        self.assertIsNone(user.membership_days_left(now))

        user.membership_expiry = now + timedelta(days=10, hours=1)
        self.assertTrue(user.has_active_membership(now))
        self.assertEqual(user.membership_days_left(now), 10)

        user.membership_expiry = now - timedelta(seconds=1)
        self.assertFalse(user.has_active_membership(now))


class CsrfFlowTests(TestCase):
    def setUp(self):
        self.client = Client(enforce_csrf_checks=True)

    def _send(self, method, name, payload):
        return getattr(self.client, method)(
            reverse(name),
            data=json.dumps(payload),
            content_type="application/json",
            HTTP_X_CSRFTOKEN=self.client.cookies["csrftoken"].value,
        )

    def test_post_without_token_is_rejected(self):
        response = self.client.post(
            reverse("accounts:register"),
            data=json.dumps({"name": "Dev", "email": "dev@example.com", "password": "secret123"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)

    def test_token_endpoint_then_register_login_and_update(self):
        response = self.client.get(reverse("accounts:csrf"))
        self.assertEqual(response.status_code, 200)
        self.assertIn("csrftoken", self.client.cookies)
        self.assertTrue(response.json()["csrfToken"])

        response = self._send(
            "post", "accounts:register", {"name": "Dev", "email": "dev@example.com", "password": "secret123"}
        )
        self.assertEqual(response.status_code, 200)

        response = self._send("post", "accounts:login", {"email": "dev@example.com", "password": "secret123"})
        self.assertEqual(response.status_code, 200)
        user_id = response.json()["user"]["id"]

        response = self._send("put", "accounts:user_update", {"userId": user_id, "phone": "+91 9222222222"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["phone"], "+91 9222222222")
