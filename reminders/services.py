from __future__ import annotations

import logging
import smtplib
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from core.api import parse_id
from core.telegram_notify import notify_broadcast_sent

from .models import BroadcastReminder, Priority, Reminder, ReminderType


logger = logging.getLogger(__name__)

SYSTEM_NAME = "System"
# Recipients are always real users (views 404 on unknown ids); this only
# covers accounts with neither a name nor an e-mail.
UNKNOWN_USER_NAME = "Unknown User"

EDITABLE_FIELDS = ("type", "message", "priority")


def default_expiry_days() -> int:
    return max(int(getattr(settings, "GYM_REMINDER_DEFAULT_EXPIRY_DAYS", 1) or 1), 1)


def expiry_from_days(expiry_days=None, *, now=None):
    """now + expiry_days; missing, non-numeric or non-positive values use the default."""
    now = now or timezone.now()
    try:
        days = int(expiry_days)
    except (TypeError, ValueError):
        days = 0
    if days <= 0:
        days = default_expiry_days()
    return now + timedelta(days=days)


def _clean_type(value) -> str:
    value = str(value or "").strip()
    if value not in ReminderType.values:
        raise ValidationError(f"Unknown reminder type: {value}")
    return value


def _clean_priority(value) -> str:
    value = str(value or "").strip() or Priority.NORMAL
    if value not in Priority.values:
        raise ValidationError(f"Unknown priority: {value}")
    return value


def _clean_message(value) -> str:
    message = str(value or "").strip()
    if not message:
        raise ValidationError("Message cannot be empty")
    return message


def resolve_user(user_or_id):
    """User instance for an id (or None); lookups never raise."""
    if user_or_id is None or hasattr(user_or_id, "pk"):
        return user_or_id
    pk = parse_id(user_or_id)
    if pk is None:
        return None
    return get_user_model().objects.filter(pk=pk).first()


def display_name(user, fallback: str) -> str:
    if user is None:
        return fallback
    return (user.get_full_name() or user.email or "").strip() or fallback


@transaction.atomic
def create_broadcast(*, reminder_type, message, priority=None, expiry_days=None, created_by=None):
    """Record one broadcast and fan it out to every user.

    All copies share the broadcast's expiry_date. Runs in one transaction, so
    either the broadcast and all its copies exist or none do.
    """
    reminder_type = _clean_type(reminder_type)
    message = _clean_message(message)
    priority = _clean_priority(priority)

    creator = resolve_user(created_by)
    created_by_name = display_name(creator, SYSTEM_NAME)

    now = timezone.now()
    expiry_date = expiry_from_days(expiry_days, now=now)

    roster = list(get_user_model().objects.order_by("id"))
    broadcast = BroadcastReminder.objects.create(
        type=reminder_type,
        message=message,
        priority=priority,
        sent_at=now,
        expiry_date=expiry_date,
        user_count=len(roster),
        created_by=creator,
        created_by_name=created_by_name,
    )

    Reminder.objects.bulk_create([
        Reminder(
            user=user,
            user_name=display_name(user, UNKNOWN_USER_NAME),
            type=reminder_type,
            message=message,
            priority=priority,
            sent_at=now,
            expiry_date=expiry_date,
            read=False,
            created_by=creator,
            created_by_name=created_by_name,
            broadcast=broadcast,
        )
        for user in roster
    ])
    logger.info("Broadcast %s fanned out to %s users", broadcast.pk, len(roster))

    notify_broadcast_sent(broadcast=broadcast)
    return broadcast


def create_reminder(*, user, reminder_type, message, priority=None, expiry_days=None, created_by=None) -> Reminder:
    creator = resolve_user(created_by)
    now = timezone.now()
    return Reminder.objects.create(
        user=user,
        user_name=display_name(user, UNKNOWN_USER_NAME),
        type=_clean_type(reminder_type),
        message=_clean_message(message),
        priority=_clean_priority(priority),
        sent_at=now,
        expiry_date=expiry_from_days(expiry_days, now=now),
        read=False,
        created_by=creator,
        created_by_name=display_name(creator, SYSTEM_NAME),
    )


def send_expiry_reminder(*, user, created_by=None) -> Reminder:
    message = settings.GYM_EXPIRY_REMINDER_MESSAGE
    reminder = create_reminder(
        user=user,
        reminder_type=ReminderType.MEMBERSHIP_EXPIRY,
        message=message,
        priority=Priority.HIGH,
        created_by=created_by,
    )

    if user.email:
        try:
            send_mail(
                subject=f"{settings.GYM_NAME}: membership renewal",
                message=message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
            )
        except (smtplib.SMTPException, OSError):
            logger.warning("Expiry reminder e-mail to user %s was not sent", user.pk)

    logger.info("Expiry reminder %s sent to user %s", reminder.pk, user.pk)
    return reminder


def update_broadcast(broadcast: BroadcastReminder, data: dict) -> BroadcastReminder:
    """Edit the broadcast record only; copies already fanned out keep their values."""
    update_fields = _apply_edits(broadcast, data)
    if update_fields:
        update_fields.append("updated_at")
        broadcast.save(update_fields=update_fields)
    return broadcast


def update_reminder(reminder: Reminder, data: dict) -> Reminder:
    update_fields = _apply_edits(reminder, data)
    if "read" in data:
        if not isinstance(data["read"], bool):
            raise ValidationError("read must be true or false")
        reminder.read = data["read"]
        update_fields.append("read")
    if update_fields:
        update_fields.append("updated_at")
        reminder.save(update_fields=update_fields)
    return reminder


def _apply_edits(obj, data: dict) -> list[str]:
    cleaners = {"type": _clean_type, "message": _clean_message, "priority": _clean_priority}
    update_fields = []
    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(obj, field, cleaners[field](data[field]))
            update_fields.append(field)
    if data.get("expiryDays"):
        obj.expiry_date = expiry_from_days(data["expiryDays"])
        update_fields.append("expiry_date")
    return update_fields


def mark_read(reminder: Reminder) -> Reminder:
    if not reminder.read:
        reminder.read = True
        reminder.save(update_fields=["read", "updated_at"])
    return reminder


def purge_expired_reminders(now=None) -> tuple[int, int]:
    """Delete reminders and broadcasts whose expiry_date has passed.

    Returns (reminders_deleted, broadcasts_deleted).
    """
    now = now or timezone.now()
    reminders_deleted, _ = Reminder.objects.filter(expiry_date__lt=now).delete()
    broadcasts_deleted, _ = BroadcastReminder.objects.filter(expiry_date__lt=now).delete()
    if reminders_deleted or broadcasts_deleted:
        logger.info("Purged %s expired reminders and %s broadcasts", reminders_deleted, broadcasts_deleted)
    return reminders_deleted, broadcasts_deleted
