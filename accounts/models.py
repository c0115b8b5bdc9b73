from datetime import date

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from core.api import isoformat


class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        USER = "user", "User"

    name = models.CharField("Full name", max_length=255, blank=True)
    email = models.EmailField("Email", unique=True)
    phone = models.CharField("Phone", max_length=32, blank=True)
    age = models.PositiveSmallIntegerField("Age", default=0)
    date_of_birth = models.DateField("Date of birth", null=True, blank=True)
    gender = models.CharField("Gender", max_length=32, blank=True)
    weight = models.FloatField("Weight", default=0)
    height = models.FloatField("Height", default=0)
    goals = models.JSONField("Goals", default=list, blank=True)
    experience_level = models.CharField("Experience level", max_length=32, default="Beginner")
    profile_pic = models.TextField("Profile picture", blank=True, default="")
    role = models.CharField("Role", max_length=16, choices=Role.choices, default=Role.USER)

    membership_plan = models.ForeignKey(
        "memberships.MembershipPlan",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    membership_type = models.CharField("Plan type", max_length=32, blank=True)
    membership_start_date = models.DateTimeField("Membership start", null=True, blank=True)
    # empty means no plan was ever assigned
    membership_expiry = models.DateTimeField("Membership expiry", null=True, blank=True)

    def get_full_name(self):
        name = (self.name or "").strip()
        if name:
            return name
        return super().get_full_name()

    def get_short_name(self):
        full_name = self.get_full_name()
        if not full_name:
            return ""
        return full_name.split()[0]

    @property
    def is_admin(self) -> bool:
        return self.is_staff or self.role == self.Role.ADMIN

    def has_active_membership(self, now=None) -> bool:
        if not self.membership_expiry:
            return False
        return self.membership_expiry > (now or timezone.now())

    def membership_days_left(self, now=None) -> int | None:
        if not self.has_active_membership(now):
            return None
        delta = self.membership_expiry - (now or timezone.now())
        return delta.days

    def age_on(self, day: date) -> int:
        if not self.date_of_birth:
            return self.age or 0
        dob = self.date_of_birth
        years = day.year - dob.year
        if (day.month, day.day) < (dob.month, dob.day):
            years -= 1
        return max(years, 0)

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "name": self.get_full_name(),
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "age": self.age,
            "dateOfBirth": isoformat(self.date_of_birth) or "",
            "gender": self.gender,
            "weight": self.weight,
            "height": self.height,
            "goals": list(self.goals or []),
            "experienceLevel": self.experience_level,
            "profilePic": self.profile_pic or None,
            "role": self.role,
            "isAdmin": self.is_admin,
            "membershipId": str(self.membership_plan_id) if self.membership_plan_id else None,
            "membershipType": self.membership_type or None,
            "membershipStartDate": isoformat(self.membership_start_date),
            "membershipExpiry": isoformat(self.membership_expiry),
            "createdAt": isoformat(self.date_joined),
        }

    def __str__(self):
        return self.get_full_name() or self.email or f"Member #{self.pk}"
