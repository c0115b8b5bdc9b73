from __future__ import annotations

import json
import logging
from datetime import datetime, time, timezone as dt_timezone
from functools import wraps

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import Http404, HttpRequest, JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


logger = logging.getLogger(__name__)


def json_error(message: str, status: int = 400, **extra) -> JsonResponse:
    return JsonResponse({"error": message, **extra}, status=status)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(str(m) for m in exc.messages) or "Invalid request"


def json_view(error_message: str = "Request failed"):
    """Map service exceptions to JSON responses.

    ValidationError -> 400, Http404 -> 404, DatabaseError -> 500 with details.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(request: HttpRequest, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except ValidationError as exc:
                return json_error(_validation_message(exc), status=400)
            except Http404 as exc:
                return json_error(str(exc) or "Not found", status=404)
            except DatabaseError as exc:
                logger.exception("%s (%s %s)", error_message, request.method, request.path)
                return json_error(error_message, status=500, details=str(exc))

        return wrapper

    return decorator


def staff_required(view):
    @wraps(view)
    def wrapper(request: HttpRequest, *args, **kwargs):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return json_error("Authentication required", status=403)
        if not user.is_staff:
            return json_error("Admin access required", status=403)
        return view(request, *args, **kwargs)

    return wrapper


def read_json(request: HttpRequest) -> dict:
    try:
        data = json.loads(request.body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, ValueError):
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("JSON body must be an object")
    return data


def require_fields(data: dict, *names: str, message: str | None = None) -> None:
    missing = [n for n in names if data.get(n) in (None, "", [])]
    if missing:
        raise ValidationError(message or f"Missing required fields: {', '.join(missing)}")


def parse_id(value) -> int | None:
    try:
        pk = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return pk if pk > 0 else None


def get_or_404(model_or_queryset, object_id, message: str):
    manager = getattr(model_or_queryset, "_default_manager", model_or_queryset)
    pk = parse_id(object_id)
    obj = manager.filter(pk=pk).first() if pk is not None else None
    if obj is None:
        raise Http404(message)
    return obj


def parse_moment(value, field: str) -> datetime:
    """Accept an ISO datetime or a bare YYYY-MM-DD date, return an aware datetime."""
    raw = str(value or "").strip()
    if not raw:
        raise ValidationError(f"{field} is required")

    try:
        moment = parse_datetime(raw)
        if moment is None:
            day = parse_date(raw)
            moment = datetime.combine(day, time.min) if day else None
    except ValueError:
        moment = None

    if moment is None:
        raise ValidationError(f"{field} is not a valid date")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment, timezone.get_current_timezone())
    return moment


def isoformat(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone(dt_timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return value.isoformat()
