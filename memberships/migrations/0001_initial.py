import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = [migrations.swappable_dependency(settings.AUTH_USER_MODEL)]
    operations = [
        migrations.CreateModel(
            name="MembershipPlan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("duration", models.PositiveSmallIntegerField(help_text="Duration in months")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("price_per_month", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("features", models.JSONField(blank=True, default=list)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("workout", "Workout"),
                            ("gym-cardio", "Gym + Cardio"),
                            ("bodybuilding", "Bodybuilding"),
                            ("bodybuilding-cardio", "Bodybuilding + Cardio"),
                            ("specialized", "Specialized"),
                        ],
                        default="workout",
                        max_length=32,
                    ),
                ),
                ("eligibility", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("badge", models.CharField(blank=True, default="", max_length=64)),
                ("best_for", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ("category", "duration", "price")},
        ),
        migrations.AddConstraint(
            model_name="membershipplan",
            constraint=models.UniqueConstraint(fields=("name", "price"), name="uniq_membership_plan_name_price"),
        ),
        migrations.CreateModel(
            name="MembershipAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("plan_type", models.CharField(max_length=32)),
                ("start_date", models.DateTimeField()),
                ("expiry_date", models.DateTimeField()),
                ("is_extension", models.BooleanField(default=False)),
                ("addons", models.JSONField(blank=True, default=list)),
                ("total_price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("assigned_at", models.DateTimeField(auto_now_add=True)),
                (
                    "assigned_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "membership_plan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignments",
                        to="memberships.membershipplan",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="membership_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-assigned_at", "-id"),
                "indexes": [models.Index(fields=["user", "assigned_at"], name="assignment_user_at_idx")],
            },
        ),
    ]
