import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


TYPE_CHOICES = [
    ("general", "General"),
    ("membership_expiry", "Membership expiry"),
    ("payment_due", "Payment due"),
    ("appointment", "Appointment"),
    ("promotion", "Promotion"),
]
PRIORITY_CHOICES = [("low", "Low"), ("normal", "Normal"), ("high", "High"), ("urgent", "Urgent")]


class Migration(migrations.Migration):
    initial = True
    dependencies = [migrations.swappable_dependency(settings.AUTH_USER_MODEL)]
    operations = [
        migrations.CreateModel(
            name="BroadcastReminder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=TYPE_CHOICES, default="general", max_length=32)),
                ("message", models.TextField()),
                ("priority", models.CharField(choices=PRIORITY_CHOICES, default="normal", max_length=16)),
                ("sent_at", models.DateTimeField()),
                ("expiry_date", models.DateTimeField(db_index=True)),
                ("user_count", models.PositiveIntegerField(default=0)),
                ("created_by_name", models.CharField(default="System", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ("-created_at", "-id")},
        ),
        migrations.CreateModel(
            name="Reminder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_name", models.CharField(default="Unknown User", max_length=255)),
                ("type", models.CharField(choices=TYPE_CHOICES, default="general", max_length=32)),
                ("message", models.TextField()),
                ("priority", models.CharField(choices=PRIORITY_CHOICES, default="normal", max_length=16)),
                ("sent_at", models.DateTimeField()),
                ("expiry_date", models.DateTimeField(db_index=True)),
                ("read", models.BooleanField(default=False)),
                ("created_by_name", models.CharField(default="System", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "broadcast",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="copies",
                        to="reminders.broadcastreminder",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reminders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [models.Index(fields=["user", "created_at"], name="reminder_user_created_idx")],
            },
        ),
    ]
