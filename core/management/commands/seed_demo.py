from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from community.models import Question, Review
from memberships.models import MembershipPlan


TERMS = (
    (1, "Monthly"),
    (3, "Quarterly"),
    (6, "Half Yearly"),
    (12, "Yearly"),
)

BASE_FEATURES = [
    "Access to all gym equipment",
    "Basic workout guidance",
    "Locker facility",
    "Free water",
]
CARDIO_FEATURES = [
    "Full cardio section access",
    "Treadmill, elliptical, cycling",
]

# category -> (title, prices per term, extra features, badges per term)
CATALOG = {
    MembershipPlan.Category.WORKOUT: (
        "Workout Plan",
        (1000, 2600, 4900, 9600),
        [],
        ("Popular", "Best Value", "Great Savings", "Maximum Savings"),
    ),
    MembershipPlan.Category.GYM_CARDIO: (
        "Gym + Cardio Plan",
        (1400, 3700, 6800, 12800),
        CARDIO_FEATURES,
        ("Complete Access", "Best Value", "Premium", "Ultimate"),
    ),
    MembershipPlan.Category.BODYBUILDING: (
        "Bodybuilding Plan",
        (1000, 2600, 4900, 9600),
        ["Monthly progress tracking"],
        ("", "", "", ""),
    ),
    MembershipPlan.Category.BODYBUILDING_CARDIO: (
        "Bodybuilding + Cardio Plan",
        (1400, 3700, 6800, 12800),
        CARDIO_FEATURES + ["Monthly progress tracking", "Group cardio classes"],
        ("", "", "", ""),
    ),
}


class Command(BaseCommand):
    help = "Seed demo users, the membership plan catalog and community content (safe to re-run)"

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()

        admin, created = User.objects.get_or_create(
            email="admin@multanigym.com",
            defaults={
                "username": "admin",
                "name": "Admin User",
                "phone": "+91 9876543210",
                "role": User.Role.ADMIN,
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if created:
            admin.set_password("admin123")
            admin.save(update_fields=["password"])

        member, created = User.objects.get_or_create(
            email="john@example.com",
            defaults={
                "username": "john",
                "name": "John Doe",
                "phone": "+91 9876543211",
                "age": 28,
                "gender": "male",
                "weight": 75,
                "height": 175,
                "goals": ["Weight Loss", "Muscle Gain"],
                "experience_level": "Intermediate",
            },
        )
        if created:
            member.set_password("user123")
            member.save(update_fields=["password"])

        plans = 0
        for category, (title, prices, extra, badges) in CATALOG.items():
            for (months, label), price, badge in zip(TERMS, prices, badges):
                price = Decimal(price)
                features = BASE_FEATURES + extra
                if months >= 6:
                    features = features + ["Nutrition guidance"]
                _, created = MembershipPlan.objects.get_or_create(
                    name=f"{title} - {label}",
                    price=price,
                    defaults={
                        "duration": months,
                        "price_per_month": (price / months).quantize(Decimal("1")),
                        "features": features,
                        "category": category,
                        "badge": badge,
                    },
                )
                plans += created

        Question.objects.get_or_create(
            user=member,
            title="Best time to train?",
            defaults={
                "user_name": member.get_full_name(),
                "content": "Is morning or evening better for strength training?",
            },
        )
        Review.objects.get_or_create(
            user=member,
            defaults={
                "user_name": member.get_full_name(),
                "rating": 5,
                "comment": "Great equipment and friendly trainers.",
            },
        )

        self.stdout.write(self.style.SUCCESS(f"Demo data ensured ({plans} new plans)"))
