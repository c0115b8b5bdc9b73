import json
from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from .models import BroadcastReminder, Priority, Reminder, ReminderType
from .services import (
    create_broadcast,
    create_reminder,
    expiry_from_days,
    purge_expired_reminders,
    update_broadcast,
)


class BroadcastServiceTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.staff = user_model.objects.create_user(
            username="staff", email="staff@example.com", password="pass12345", is_staff=True, name="Coach Raj"
        )
        self.members = [
            user_model.objects.create_user(username=f"m{i}", email=f"m{i}@example.com", password="pass12345")
            for i in range(2)
        ]

    def test_broadcast_fans_out_to_every_user(self):
        broadcast = create_broadcast(
            reminder_type=ReminderType.PROMOTION,
            message="Diwali offer: 20% off yearly plans",
            expiry_days=1,
            created_by=self.staff,
        )

        self.assertEqual(broadcast.user_count, 3)
        self.assertEqual(broadcast.priority, Priority.NORMAL)
        self.assertEqual(broadcast.created_by_name, "Coach Raj")

        copies = Reminder.objects.filter(broadcast=broadcast)
        self.assertEqual(copies.count(), 3)
        self.assertEqual({c.user_id for c in copies}, {self.staff.pk, *(m.pk for m in self.members)})
        for copy in copies:
            self.assertFalse(copy.read)
            self.assertEqual(copy.expiry_date, broadcast.expiry_date)
            self.assertEqual(copy.message, broadcast.message)

    def test_broadcast_without_creator_is_attributed_to_system(self):
        broadcast = create_broadcast(reminder_type="general", message="Gym closed on Sunday")
        self.assertIsNone(broadcast.created_by)
        self.assertEqual(broadcast.created_by_name, "System")
        self.assertEqual(broadcast.as_dict()["createdBy"], "system")

    def test_unknown_type_creates_nothing(self):
        with self.assertRaises(ValidationError):
            create_broadcast(reminder_type="party", message="hello")
        self.assertEqual(BroadcastReminder.objects.count(), 0)
        self.assertEqual(Reminder.objects.count(), 0)

    def test_default_expiry_is_one_day(self):
        now = timezone.now()
        self.assertEqual(expiry_from_days(None, now=now), now + timedelta(days=1))
        self.assertEqual(expiry_from_days("abc", now=now), now + timedelta(days=1))
        self.assertEqual(expiry_from_days(7, now=now), now + timedelta(days=7))

    @override_settings(GYM_REMINDER_DEFAULT_EXPIRY_DAYS=3)
    def test_default_expiry_follows_settings(self):
        now = timezone.now()
        self.assertEqual(expiry_from_days(0, now=now), now + timedelta(days=3))

    def test_editing_broadcast_leaves_copies_untouched(self):
        broadcast = create_broadcast(reminder_type="general", message="Old text", expiry_days=1)
        old_expiry = broadcast.expiry_date

        update_broadcast(broadcast, {"message": "New text", "priority": "urgent", "expiryDays": 5})
        broadcast.refresh_from_db()
        self.assertEqual(broadcast.message, "New text")
        self.assertEqual(broadcast.priority, Priority.URGENT)
        self.assertGreater(broadcast.expiry_date, old_expiry)

        for copy in Reminder.objects.filter(broadcast=broadcast):
            self.assertEqual(copy.message, "Old text")
            self.assertEqual(copy.priority, Priority.NORMAL)
            self.assertEqual(copy.expiry_date, old_expiry)

    def test_deleting_broadcast_keeps_copies(self):
        broadcast = create_broadcast(reminder_type="general", message="Hello", expiry_days=1)
        broadcast.delete()
        self.assertEqual(Reminder.objects.count(), 3)
        self.assertFalse(Reminder.objects.filter(broadcast__isnull=False).exists())

    def test_sweep_removes_everything_past_expiry(self):
        create_broadcast(reminder_type="general", message="Short lived", expiry_days=1)
        self.assertEqual(purge_expired_reminders(), (0, 0))

        later = timezone.now() + timedelta(hours=25)
        self.assertEqual(purge_expired_reminders(now=later), (3, 1))
        self.assertEqual(BroadcastReminder.objects.count(), 0)
        self.assertEqual(Reminder.objects.count(), 0)


class AdminReminderApiTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.staff = user_model.objects.create_user(
            username="staff", email="staff@example.com", password="pass12345", is_staff=True
        )
        self.member = user_model.objects.create_user(
            username="member", email="member@example.com", password="pass12345", name="Asha"
        )

    def test_post_broadcast(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("reminders:admin_reminders"),
            data=json.dumps({"type": "payment_due", "message": "Fees due", "priority": "high"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["userCount"], 2)
        self.assertEqual(body["message"], "Reminder sent to 2 users successfully")
        self.assertTrue(body["broadcastReminder"]["isBroadcast"])
        self.assertEqual(Reminder.objects.count(), 2)

    def test_post_broadcast_requires_type_and_message(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("reminders:admin_reminders"),
            data=json.dumps({"message": "Fees due"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Missing required fields: type and message are required")

    def test_list_read_sweeps_expired_broadcasts(self):
        create_broadcast(reminder_type="general", message="Old", expiry_days=1)
        BroadcastReminder.objects.update(expiry_date=timezone.now() - timedelta(hours=1))
        Reminder.objects.update(expiry_date=timezone.now() - timedelta(hours=1))

        self.client.force_login(self.staff)
        response = self.client.get(reverse("reminders:admin_broadcast_reminders"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(Reminder.objects.count(), 0)

    def test_non_staff_cannot_broadcast(self):
        self.client.force_login(self.member)
        response = self.client.get(reverse("reminders:admin_reminders"))
        self.assertEqual(response.status_code, 403)

        self.client.logout()
        response = self.client.get(reverse("reminders:admin_reminders"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Authentication required")

    def test_broadcast_update_and_delete(self):
        broadcast = create_broadcast(reminder_type="general", message="Old", expiry_days=1)
        url = reverse("reminders:broadcast_detail", args=[broadcast.pk])
        self.client.force_login(self.staff)

        response = self.client.put(url, data=json.dumps({"message": "New"}), content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["reminder"]["message"], "New")

        response = self.client.delete(url)
        self.assertEqual(response.json()["message"], "Reminder deleted successfully")
        self.assertFalse(BroadcastReminder.objects.exists())

        response = self.client.delete(url)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Reminder not found")

    def test_send_expiry_reminder_creates_reminder_and_mails_member(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("reminders:send_reminder"),
            data=json.dumps({"userId": str(self.member.pk)}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        reminder = Reminder.objects.get(pk=int(response.json()["reminderId"]))
        self.assertEqual(reminder.type, ReminderType.MEMBERSHIP_EXPIRY)
        self.assertEqual(reminder.priority, Priority.HIGH)
        self.assertEqual(reminder.user_name, "Asha")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["member@example.com"])


class MemberReminderApiTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.member = user_model.objects.create_user(
            username="member", email="member@example.com", password="pass12345"
        )
        self.other = user_model.objects.create_user(username="other", email="other@example.com", password="pass12345")

    def test_list_requires_user_id(self):
        response = self.client.get(reverse("reminders:reminders"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "User ID required")

    def test_create_list_and_mark_read(self):
        response = self.client.post(
            reverse("reminders:reminders"),
            data=json.dumps({"userId": str(self.member.pk), "type": "appointment", "message": "PT at 7am"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        reminder_id = response.json()["reminder"]["id"]
        create_reminder(user=self.other, reminder_type="general", message="not yours")

        response = self.client.get(reverse("reminders:reminders"), {"userId": self.member.pk})
        rows = response.json()
        self.assertEqual([r["id"] for r in rows], [reminder_id])
        self.assertFalse(rows[0]["read"])

        response = self.client.post(
            reverse("reminders:mark_read"),
            data=json.dumps({"reminderId": reminder_id}),
            content_type="application/json",
        )
        self.assertEqual(response.json(), {"success": True})
        self.assertTrue(Reminder.objects.get(pk=int(reminder_id)).read)

    def test_member_list_read_sweeps_expired_broadcast_copies(self):
        get_user_model().objects.create_user(username="third", email="third@example.com", password="pass12345")
        broadcast = create_broadcast(reminder_type="general", message="Closed today", expiry_days=1)
        self.assertEqual(broadcast.user_count, 3)
        self.assertEqual(Reminder.objects.count(), 3)

        past = timezone.now() - timedelta(hours=1)
        BroadcastReminder.objects.update(expiry_date=past)
        Reminder.objects.update(expiry_date=past)

        response = self.client.get(reverse("reminders:reminders"), {"userId": self.member.pk})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(Reminder.objects.count(), 0)
        self.assertEqual(BroadcastReminder.objects.count(), 0)

    def test_read_flag_must_be_boolean(self):
        reminder = create_reminder(user=self.member, reminder_type="general", message="Hi")
        url = reverse("reminders:reminder_detail", args=[reminder.pk])

        response = self.client.put(url, data=json.dumps({"read": "false"}), content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "read must be true or false")
        reminder.refresh_from_db()
        self.assertFalse(reminder.read)

    def test_mark_read_requires_id(self):
        response = self.client.post(reverse("reminders:mark_read"), data="{}", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Reminder ID is required")

    def test_reminder_update_and_delete(self):
        reminder = create_reminder(user=self.member, reminder_type="general", message="Hi")
        url = reverse("reminders:reminder_detail", args=[reminder.pk])

        response = self.client.put(
            url, data=json.dumps({"read": True, "message": "Hello"}), content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)
        reminder.refresh_from_db()
        self.assertTrue(reminder.read)
        self.assertEqual(reminder.message, "Hello")

        self.client.delete(url)
        self.assertFalse(Reminder.objects.filter(pk=reminder.pk).exists())


class PurgeCommandTests(TestCase):
    def test_command_reports_counts(self):
        user = get_user_model().objects.create_user(username="u", email="u@example.com", password="pass12345")
        reminder = create_reminder(user=user, reminder_type="general", message="old")
        Reminder.objects.filter(pk=reminder.pk).update(expiry_date=timezone.now() - timedelta(minutes=1))

        out = StringIO()
        call_command("purge_expired_reminders", stdout=out)
        self.assertIn("Purged 1 reminders and 0 broadcast reminders", out.getvalue())
        self.assertFalse(Reminder.objects.exists())
