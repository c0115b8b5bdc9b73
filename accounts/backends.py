from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class EmailOrUsernameBackend(ModelBackend):
    """Members sign in with their e-mail; staff accounts may still use a username."""

    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        login_value = (email or username or "").strip()
        if not login_value or password is None:
            return None

        manager = get_user_model()._default_manager
        candidates = []
        if "@" in login_value:
            candidates.append(manager.filter(email__iexact=normalize_email(login_value)).first())
        candidates.append(manager.filter(username__iexact=login_value).first())

        for user in candidates:
            if user is not None and user.check_password(password) and self.user_can_authenticate(user):
                return user
        return None
