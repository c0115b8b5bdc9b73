from django.conf import settings
from django.db import models

from core.api import isoformat


class MembershipPlan(models.Model):
    class Category(models.TextChoices):
        WORKOUT = "workout", "Workout"
        GYM_CARDIO = "gym-cardio", "Gym + Cardio"
        BODYBUILDING = "bodybuilding", "Bodybuilding"
        BODYBUILDING_CARDIO = "bodybuilding-cardio", "Bodybuilding + Cardio"
        SPECIALIZED = "specialized", "Specialized"

    name = models.CharField(max_length=120)
    duration = models.PositiveSmallIntegerField(help_text="Duration in months")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    price_per_month = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    features = models.JSONField(default=list, blank=True)
    category = models.CharField(max_length=32, choices=Category.choices, default=Category.WORKOUT)
    eligibility = models.CharField(max_length=255, blank=True, default="")
    description = models.CharField(max_length=255, blank=True, default="")
    badge = models.CharField(max_length=64, blank=True, default="")
    best_for = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("category", "duration", "price")
        constraints = [
            models.UniqueConstraint(fields=["name", "price"], name="uniq_membership_plan_name_price"),
        ]

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "name": self.name,
            "duration": self.duration,
            "price": float(self.price),
            "pricePerMonth": float(self.price_per_month) if self.price_per_month is not None else None,
            "features": list(self.features or []),
            "category": self.category,
            "eligibility": self.eligibility or None,
            "description": self.description or None,
            "badge": self.badge or None,
            "bestFor": self.best_for or None,
            "createdAt": isoformat(self.created_at),
        }

    def __str__(self):
        return f"{self.name} ({self.duration} mo, {self.price})"


class MembershipAssignment(models.Model):
    """Audit record of one assignment action. Rows are never updated."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="membership_assignments")
    membership_plan = models.ForeignKey(MembershipPlan, on_delete=models.PROTECT, related_name="assignments")
    plan_type = models.CharField(max_length=32)
    start_date = models.DateTimeField()
    expiry_date = models.DateTimeField()
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    is_extension = models.BooleanField(default=False)
    addons = models.JSONField(default=list, blank=True)
    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-assigned_at", "-id")
        indexes = [
            models.Index(fields=["user", "assigned_at"], name="assignment_user_at_idx"),
        ]

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "userId": str(self.user_id),
            "membershipId": str(self.membership_plan_id),
            "planType": self.plan_type,
            "startDate": isoformat(self.start_date),
            "expiryDate": isoformat(self.expiry_date),
            "assignedBy": str(self.assigned_by_id) if self.assigned_by_id else None,
            "isExtension": self.is_extension,
            "addons": list(self.addons or []),
            "totalPrice": float(self.total_price),
            "assignedAt": isoformat(self.assigned_at),
        }

    def __str__(self):
        kind = "extension" if self.is_extension else "new"
        return f"Assignment({self.user_id}) {self.plan_type} until {self.expiry_date:%Y-%m-%d} [{kind}]"
