from django.contrib.auth import get_user_model
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.api import get_or_404, json_error, json_view, parse_id, read_json, require_fields, staff_required

from .models import BroadcastReminder, Reminder
from .services import (
    create_broadcast,
    create_reminder,
    mark_read,
    purge_expired_reminders,
    send_expiry_reminder,
    update_broadcast,
    update_reminder,
)


def _broadcast_list():
    purge_expired_reminders()
    return JsonResponse([b.as_dict() for b in BroadcastReminder.objects.all()], safe=False)


@require_http_methods(["GET", "POST"])
@staff_required
@json_view("Failed to create reminder")
def admin_reminders(request: HttpRequest):
    if request.method == "GET":
        return _broadcast_list()

    data = read_json(request)
    require_fields(data, "type", "message", message="Missing required fields: type and message are required")

    broadcast = create_broadcast(
        reminder_type=data["type"],
        message=data["message"],
        priority=data.get("priority"),
        expiry_days=data.get("expiryDays"),
        created_by=data.get("createdBy") or request.user,
    )
    return JsonResponse({
        "message": f"Reminder sent to {broadcast.user_count} users successfully",
        "broadcastReminder": broadcast.as_dict(),
        "userCount": broadcast.user_count,
    })


@require_GET
@staff_required
@json_view("Failed to fetch broadcast reminders")
def admin_broadcast_reminders(request: HttpRequest):
    return _broadcast_list()


@require_http_methods(["PUT", "DELETE"])
@staff_required
@json_view("Failed to update reminder")
def broadcast_detail(request: HttpRequest, reminder_id):
    broadcast = get_or_404(BroadcastReminder, reminder_id, "Reminder not found")

    if request.method == "DELETE":
        broadcast.delete()
        return JsonResponse({"message": "Reminder deleted successfully"})

    update_broadcast(broadcast, read_json(request))
    return JsonResponse({"message": "Reminder updated successfully", "reminder": broadcast.as_dict()})


@require_POST
@staff_required
@json_view("Failed to send reminder")
def send_reminder(request: HttpRequest):
    data = read_json(request)
    require_fields(data, "userId", message="User ID is required")
    user = get_or_404(get_user_model(), data["userId"], "User not found")

    reminder = send_expiry_reminder(user=user, created_by=request.user)
    return JsonResponse({"success": True, "reminderId": str(reminder.pk)})


@require_http_methods(["GET", "POST"])
@json_view("Failed to fetch reminders")
def reminders(request: HttpRequest):
    if request.method == "GET":
        user_id = parse_id(request.GET.get("userId"))
        if not user_id:
            return json_error("User ID required", status=400)

        purge_expired_reminders()
        rows = Reminder.objects.filter(user_id=user_id)
        return JsonResponse([r.as_dict() for r in rows], safe=False)

    data = read_json(request)
    require_fields(
        data,
        "userId",
        "message",
        "type",
        message="Missing required fields: userId, message, and type are required",
    )
    user = get_or_404(get_user_model(), data["userId"], "User not found")

    reminder = create_reminder(
        user=user,
        reminder_type=data["type"],
        message=data["message"],
        priority=data.get("priority"),
        expiry_days=data.get("expiryDays"),
        created_by=data.get("createdBy"),
    )
    return JsonResponse({"message": "Reminder created successfully", "reminder": reminder.as_dict()})


@require_POST
@json_view("Failed to mark reminder as read")
def reminder_mark_read(request: HttpRequest):
    data = read_json(request)
    require_fields(data, "reminderId", message="Reminder ID is required")
    reminder = get_or_404(Reminder, data["reminderId"], "Reminder not found")
    mark_read(reminder)
    return JsonResponse({"success": True})


@require_http_methods(["PUT", "DELETE"])
@json_view("Failed to update reminder")
def reminder_detail(request: HttpRequest, reminder_id):
    reminder = get_or_404(Reminder, reminder_id, "Reminder not found")

    if request.method == "DELETE":
        reminder.delete()
        return JsonResponse({"message": "Reminder deleted successfully"})

    update_reminder(reminder, read_json(request))
    return JsonResponse({"message": "Reminder updated successfully", "reminder": reminder.as_dict()})
