from django.contrib.auth import authenticate, get_user_model, login, logout
from django.middleware.csrf import get_token
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from django.http import HttpRequest, JsonResponse

from core.api import get_or_404, json_error, json_view, read_json, staff_required

from .services import register_user, update_profile


def _can_access(request: HttpRequest, user) -> bool:
    me = request.user
    if not me.is_authenticated:
        return False
    return me.is_staff or me.pk == user.pk


@require_GET
@ensure_csrf_cookie
def csrf(request: HttpRequest):
    # JSON clients read the token here and send it back as X-CSRFToken
    return JsonResponse({"csrfToken": get_token(request)})


@require_POST
@json_view("Failed to register user")
def register(request: HttpRequest):
    user = register_user(read_json(request))
    return JsonResponse({"message": "User registered successfully", "user": user.as_dict()})


@require_POST
@json_view("Failed to login")
def login_view(request: HttpRequest):
    data = read_json(request)
    email = str(data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return json_error("Email and password are required", status=400)

    user = authenticate(request, username=email, password=password)
    if user is None:
        return json_error("Invalid email or password", status=401)

    login(request, user)
    # login rotates the token; hand the new one back
    return JsonResponse({"message": "Login successful", "user": user.as_dict(), "csrfToken": get_token(request)})


@require_POST
def logout_view(request: HttpRequest):
    logout(request)
    return JsonResponse({"success": True})


@require_GET
@json_view("Failed to fetch user")
def user_detail(request: HttpRequest, user_id):
    user = get_or_404(get_user_model(), user_id, "User not found")
    if not _can_access(request, user):
        return json_error("Not allowed", status=403)
    return JsonResponse({"user": user.as_dict()})


@require_http_methods(["PUT", "POST"])
@json_view("Failed to update user")
def user_update(request: HttpRequest):
    data = read_json(request)
    user_id = data.pop("userId", None)
    if not user_id:
        return json_error("User ID is required", status=400)

    user = get_or_404(get_user_model(), user_id, "User not found")
    if not _can_access(request, user):
        return json_error("Not allowed", status=403)

    update_profile(user, data)
    user.refresh_from_db()
    return JsonResponse({"user": user.as_dict(), "success": True})


@require_GET
@staff_required
@json_view("Failed to fetch users")
def admin_users(request: HttpRequest):
    users = get_user_model().objects.select_related("membership_plan").order_by("-date_joined", "-id")
    return JsonResponse([u.as_dict() for u in users], safe=False)
