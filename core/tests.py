import json
from datetime import date, datetime, timezone as dt_timezone
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.db import DatabaseError
from django.http import JsonResponse
from django.test import RequestFactory, TestCase, override_settings

from community.models import Question, Review
from memberships.models import MembershipPlan

from .api import isoformat, json_view, parse_id, parse_moment, read_json, require_fields
from .telegram_notify import tg_send


class ApiHelperTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_json_view_maps_exceptions(self):
        @json_view("Failed to do the thing")
        def invalid(request):
            raise ValidationError("Name cannot be empty")

        @json_view("Failed to do the thing")
        def broken(request):
            raise DatabaseError("connection lost")

        request = self.factory.get("/api/thing/")
        response = invalid(request)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(json.loads(response.content), {"error": "Name cannot be empty"})

        with self.assertLogs("core.api", level="ERROR"):
            response = broken(request)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            json.loads(response.content),
            {"error": "Failed to do the thing", "details": "connection lost"},
        )

    def test_json_view_passes_through_responses(self):
        @json_view()
        def ok(request):
            return JsonResponse({"success": True})

        response = ok(self.factory.get("/"))
        self.assertEqual(response.status_code, 200)

    def test_read_json_rejects_bad_bodies(self):
        request = self.factory.post("/", data="not json", content_type="application/json")
        with self.assertRaises(ValidationError):
            read_json(request)

        request = self.factory.post("/", data="[1, 2]", content_type="application/json")
        with self.assertRaises(ValidationError):
            read_json(request)

        request = self.factory.post("/", data="", content_type="application/json")
        self.assertEqual(read_json(request), {})

    def test_require_fields_treats_blank_as_missing(self):
        require_fields({"a": 1, "b": "x"}, "a", "b")
        with self.assertRaisesMessage(ValidationError, "Missing required fields: b, c"):
            require_fields({"a": 0, "b": "", "c": []}, "a", "b", "c")

    def test_parse_id(self):
        self.assertEqual(parse_id("12"), 12)
        self.assertEqual(parse_id(7), 7)
        for bad in (None, "", "abc", "0", "-3"):
            self.assertIsNone(parse_id(bad))

    def test_parse_moment_accepts_dates_and_datetimes(self):
        moment = parse_moment("2024-05-20", "startDate")
        self.assertEqual(isoformat(moment), "2024-05-19T18:30:00.000Z")

        moment = parse_moment("2024-05-20T10:00:00Z", "startDate")
        self.assertEqual(moment, datetime(2024, 5, 20, 10, tzinfo=dt_timezone.utc))

        with self.assertRaisesMessage(ValidationError, "startDate is required"):
            parse_moment("", "startDate")
        with self.assertRaisesMessage(ValidationError, "startDate is not a valid date"):
            parse_moment("2024-13-45", "startDate")

    def test_isoformat(self):
        self.assertIsNone(isoformat(None))
        self.assertEqual(isoformat(date(2024, 1, 2)), "2024-01-02")


class TelegramTests(TestCase):
    @override_settings(TELEGRAM_NOTIFICATIONS=False)
    def test_disabled_sends_nothing(self):
        with mock.patch("core.telegram_notify.requests.post") as post:
            tg_send("hello")
        post.assert_not_called()

    @override_settings(TELEGRAM_NOTIFICATIONS=True, TELEGRAM_BOT_TOKEN="token", TELEGRAM_CHAT_ID="42")
    def test_enabled_posts_to_bot_api(self):
        with mock.patch("core.telegram_notify.requests.post") as post:
            tg_send("hello")
        post.assert_called_once()
        self.assertIn("bottoken/sendMessage", post.call_args.args[0])


class SeedDemoTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_demo", stdout=out)
        call_command("seed_demo", stdout=out)

        self.assertEqual(MembershipPlan.objects.count(), 16)
        self.assertEqual(get_user_model().objects.count(), 2)
        self.assertEqual(Question.objects.count(), 1)
        self.assertEqual(Review.objects.count(), 1)

        admin = get_user_model().objects.get(email="admin@multanigym.com")
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.check_password("admin123"))
        self.assertIn("(0 new plans)", out.getvalue())
