import logging

import requests
from django.conf import settings
from django.utils import timezone
from django.utils.html import escape


logger = logging.getLogger(__name__)


def tg_send(text: str):
    if not getattr(settings, "TELEGRAM_NOTIFICATIONS", True):
        return

    token = getattr(settings, "TELEGRAM_BOT_TOKEN", "")
    chat_id = getattr(settings, "TELEGRAM_CHAT_ID", "")

    if not token or not chat_id:
        return

    url = f"https://api.telegram.org/bot{token}/sendMessage"
    payload = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }

    try:
        requests.post(url, json=payload, timeout=5)
    except requests.RequestException:
        logger.warning("Telegram message was not sent due to a request error")


def _fmt_user(user) -> str:
    if not user:
        return "—"
    full_name = ""
    if hasattr(user, "get_full_name"):
        full_name = (user.get_full_name() or "").strip()
    return escape(full_name or str(user) or "—")


def _fmt_date(value) -> str:
    if not value:
        return "—"
    return timezone.localtime(value).strftime("%d.%m.%Y")


def notify_membership_assigned(*, user, plan_name: str, expiry_date, is_extension: bool, total_price):
    title = "🔁 <b>Membership extended</b>" if is_extension else "🏋️ <b>New membership</b>"
    tg_send(
        f"{title}\n"
        f"Member: <b>{_fmt_user(user)}</b>\n"
        f"Plan: <b>{escape(plan_name or '—')}</b>\n"
        f"Valid until: <b>{_fmt_date(expiry_date)}</b>\n"
        f"Total: <b>₹{escape(str(total_price))}</b>"
    )


def notify_broadcast_sent(*, broadcast):
    message = (broadcast.message or "").strip()
    if len(message) > 200:
        message = message[:199].rstrip() + "…"
    tg_send(
        "📣 <b>Broadcast reminder sent</b>\n"
        f"Type: <b>{escape(broadcast.type)}</b> • Priority: <b>{escape(broadcast.priority)}</b>\n"
        f"Recipients: <b>{broadcast.user_count}</b>\n"
        f"Expires: <b>{_fmt_date(broadcast.expiry_date)}</b>\n"
        f"By: <b>{escape(broadcast.created_by_name or 'System')}</b>\n"
        f"{escape(message)}"
    )
