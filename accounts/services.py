from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from .backends import normalize_email


logger = logging.getLogger(__name__)

# request key -> model field
PROFILE_FIELDS = {
    "name": "name",
    "phone": "phone",
    "age": "age",
    "dateOfBirth": "date_of_birth",
    "gender": "gender",
    "weight": "weight",
    "height": "height",
    "goals": "goals",
    "experienceLevel": "experience_level",
    "profilePic": "profile_pic",
}


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError):
        return 0


def _to_goals(value) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(g).strip() for g in value if str(g).strip()]
    if value:
        return [str(value).strip()]
    return []


def _to_date(value):
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        day = parse_date(raw[:10])
    except ValueError:
        day = None
    if day is None:
        raise ValidationError("dateOfBirth is not a valid date")
    return day


def _clean_profile_value(field: str, value):
    if field in ("weight", "height"):
        return _to_float(value)
    if field == "age":
        return _to_int(value)
    if field == "goals":
        return _to_goals(value)
    if field == "date_of_birth":
        return _to_date(value)
    return str(value or "").strip()


def _unique_username(base: str) -> str:
    user_model = get_user_model()
    base = (base or "member").strip()[:140] or "member"
    candidate = base
    n = 1
    while user_model._default_manager.filter(username__iexact=candidate).exists():
        n += 1
        candidate = f"{base}-{n}"
    return candidate


@transaction.atomic
def register_user(data: dict):
    email = normalize_email(data.get("email"))
    password = data.get("password") or ""
    name = str(data.get("name") or "").strip()
    if not email or not password or not name:
        raise ValidationError("Missing required fields: email, password, and name are required")

    user_model = get_user_model()
    if user_model._default_manager.filter(email__iexact=email).exists():
        raise ValidationError("Email already registered")

    username = str(data.get("username") or "").strip()
    if username:
        if user_model._default_manager.filter(username__iexact=username).exists():
            raise ValidationError("Username already taken")
    else:
        username = _unique_username(email.split("@")[0])

    profile = {
        field: _clean_profile_value(field, data.get(key))
        for key, field in PROFILE_FIELDS.items()
        if key != "name"
    }
    if not profile["experience_level"]:
        profile["experience_level"] = "Beginner"
    if profile["date_of_birth"] and not profile["age"]:
        probe = user_model(date_of_birth=profile["date_of_birth"])
        profile["age"] = probe.age_on(timezone.localdate())

    user = user_model.objects.create_user(
        username=username,
        email=email,
        password=password,
        name=name,
        role=user_model.Role.USER,
        **profile,
    )
    logger.info("Registered user %s (%s)", user.pk, email)
    return user


def update_profile(user, data: dict):
    update_fields = []
    for key, field in PROFILE_FIELDS.items():
        if key not in data:
            continue
        setattr(user, field, _clean_profile_value(field, data[key]))
        update_fields.append(field)

    if "name" in update_fields and not user.name:
        raise ValidationError("Name cannot be empty")

    if update_fields:
        user.save(update_fields=update_fields)
    return user
