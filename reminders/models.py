from django.conf import settings
from django.db import models

from core.api import isoformat


class ReminderType(models.TextChoices):
    GENERAL = "general", "General"
    MEMBERSHIP_EXPIRY = "membership_expiry", "Membership expiry"
    PAYMENT_DUE = "payment_due", "Payment due"
    APPOINTMENT = "appointment", "Appointment"
    PROMOTION = "promotion", "Promotion"


class Priority(models.TextChoices):
    LOW = "low", "Low"
    NORMAL = "normal", "Normal"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


class BroadcastReminder(models.Model):
    type = models.CharField(max_length=32, choices=ReminderType.choices, default=ReminderType.GENERAL)
    message = models.TextField()
    priority = models.CharField(max_length=16, choices=Priority.choices, default=Priority.NORMAL)

    sent_at = models.DateTimeField()
    expiry_date = models.DateTimeField(db_index=True)
    # roster size when the broadcast went out
    user_count = models.PositiveIntegerField(default=0)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_by_name = models.CharField(max_length=255, default="System")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "type": self.type,
            "message": self.message,
            "priority": self.priority,
            "sentAt": isoformat(self.sent_at),
            "expiryDate": isoformat(self.expiry_date),
            "createdBy": str(self.created_by_id) if self.created_by_id else "system",
            "createdByName": self.created_by_name,
            "isBroadcast": True,
            "userCount": self.user_count,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __str__(self):
        return f"Broadcast({self.type}) to {self.user_count} until {self.expiry_date:%Y-%m-%d %H:%M}"


class Reminder(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reminders")
    user_name = models.CharField(max_length=255, default="Unknown User")

    type = models.CharField(max_length=32, choices=ReminderType.choices, default=ReminderType.GENERAL)
    message = models.TextField()
    priority = models.CharField(max_length=16, choices=Priority.choices, default=Priority.NORMAL)

    sent_at = models.DateTimeField()
    expiry_date = models.DateTimeField(db_index=True)
    read = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_by_name = models.CharField(max_length=255, default="System")

    # Copies outlive edits and deletion of their broadcast.
    broadcast = models.ForeignKey(
        BroadcastReminder,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="copies",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["user", "created_at"], name="reminder_user_created_idx"),
        ]

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "userId": str(self.user_id),
            "userName": self.user_name,
            "type": self.type,
            "message": self.message,
            "priority": self.priority,
            "sentAt": isoformat(self.sent_at),
            "expiryDate": isoformat(self.expiry_date),
            "read": self.read,
            "createdBy": str(self.created_by_id) if self.created_by_id else "system",
            "createdByName": self.created_by_name,
            "broadcastId": str(self.broadcast_id) if self.broadcast_id else None,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __str__(self):
        state = "read" if self.read else "unread"
        return f"Reminder({self.user_id}) {self.type} [{state}]"
