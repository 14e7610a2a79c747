"""
Harmoniq Safety - In-app notifications
"""
import logging
from typing import Dict, List, Optional

from ..db import _today
from ..errors import NotFound
from ..stores import get_store

logger = logging.getLogger("harmoniq.notifications")

NOTIFICATION_TYPES = (
    "maintenance_due", "maintenance_overdue", "asset_alert",
    "incident", "action_assigned", "review", "system",
)


def already_sent_today(user_id: str, dedupe_key: str) -> bool:
    today = _today()
    return any(
        n.get("dedupe_key") == dedupe_key and (n.get("created_at") or "")[:10] == today
        for n in get_store("notifications").filter(user_id=user_id)
    )


def create_notification(company_id: str, user_id: str, notification_type: str, title: str,
                        message: str = "", link: Optional[str] = None,
                        dedupe_key: Optional[str] = None) -> Optional[Dict]:
    """Store a notification. Returns None when dedupe_key was already sent to this user today."""
    if dedupe_key and already_sent_today(user_id, dedupe_key):
        return None
    notification = get_store("notifications").add({
        "company_id": company_id,
        "user_id": user_id,
        "type": notification_type if notification_type in NOTIFICATION_TYPES else "system",
        "title": title,
        "message": message,
        "link": link,
        "read": False,
        "dedupe_key": dedupe_key,
    })
    logger.debug("Notification %s -> %s: %s", notification["id"], user_id, title)
    return notification


def list_notifications(user_id: str, unread_only: bool = False, limit: int = 50) -> List[Dict]:
    notifications = get_store("notifications").filter(user_id=user_id)
    if unread_only:
        notifications = [n for n in notifications if not n.get("read")]
    notifications.sort(key=lambda n: n.get("created_at") or "", reverse=True)
    return notifications[:limit]


def unread_count(user_id: str) -> int:
    return sum(1 for n in get_store("notifications").filter(user_id=user_id) if not n.get("read"))


def mark_read(user_id: str, notification_id: str) -> Dict:
    store = get_store("notifications")
    notification = store.get_by_id(notification_id)
    if not notification or notification.get("user_id") != user_id:
        raise NotFound("Notification not found")
    return store.update(notification_id, {"read": True})


def mark_all_read(user_id: str) -> int:
    store = get_store("notifications")
    marked = 0
    for n in store.filter(user_id=user_id):
        if not n.get("read"):
            store.update(n["id"], {"read": True})
            marked += 1
    return marked
