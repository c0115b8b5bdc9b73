import django.contrib.auth.models
import django.contrib.auth.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = [("auth", "0012_alter_user_first_name_max_length")]
    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, verbose_name="superuser status")),
                (
                    "username",
                    models.CharField(
                        error_messages={"unique": "A user with that username already exists."},
                        max_length=150,
                        unique=True,
                        validators=[django.contrib.auth.validators.UnicodeUsernameValidator()],
                        verbose_name="username",
                    ),
                ),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("is_staff", models.BooleanField(default=False, verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("name", models.CharField(blank=True, max_length=255, verbose_name="Full name")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=32, verbose_name="Phone")),
                ("age", models.PositiveSmallIntegerField(default=0, verbose_name="Age")),
                ("date_of_birth", models.DateField(blank=True, null=True, verbose_name="Date of birth")),
                ("gender", models.CharField(blank=True, max_length=32, verbose_name="Gender")),
                ("weight", models.FloatField(default=0, verbose_name="Weight")),
                ("height", models.FloatField(default=0, verbose_name="Height")),
                ("goals", models.JSONField(blank=True, default=list, verbose_name="Goals")),
                ("experience_level", models.CharField(default="Beginner", max_length=32, verbose_name="Experience level")),
                ("profile_pic", models.TextField(blank=True, default="", verbose_name="Profile picture")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("user", "User")],
                        default="user",
                        max_length=16,
                        verbose_name="Role",
                    ),
                ),
                ("membership_type", models.CharField(blank=True, max_length=32, verbose_name="Plan type")),
                ("membership_start_date", models.DateTimeField(blank=True, null=True, verbose_name="Membership start")),
                ("membership_expiry", models.DateTimeField(blank=True, null=True, verbose_name="Membership expiry")),
                ("groups", models.ManyToManyField(blank=True, related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "abstract": False,
            },
            managers=[("objects", django.contrib.auth.models.UserManager())],
        ),
    ]
