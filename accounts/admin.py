from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    fieldsets = UserAdmin.fieldsets + (
        ("Profile", {"fields": ("name", "phone", "age", "date_of_birth", "gender", "weight", "height", "goals", "experience_level", "role")}),
        ("Membership", {"fields": ("membership_plan", "membership_type", "membership_start_date", "membership_expiry")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("username", "email", "name", "password1", "password2")}),
    )
    list_display = ("id", "name", "email", "phone", "membership_type", "membership_expiry", "is_staff")
    list_filter = ("role", "is_staff", "membership_type")
    search_fields = ("name", "email", "phone", "username")
