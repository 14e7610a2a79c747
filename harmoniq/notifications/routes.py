"""
Harmoniq Safety - Notification API Routes
"""
from fastapi import FastAPI, Request

from ..auth import require_user
from ..auth.permissions import ADMIN_ROLES
from .models import list_notifications, mark_all_read, mark_read, unread_count
from .scan import scan_company

PREFIX = "/api/companies/{slug}"


def register_notification_routes(app: FastAPI):
    """Register the current user's notification endpoints."""

    @app.get(PREFIX + "/notifications")
    async def api_notifications(slug: str, request: Request):
        user, _ = require_user(request, slug)
        unread_only = request.query_params.get("unread") == "true"
        return {
            "ok": True,
            "notifications": list_notifications(user["id"], unread_only=unread_only),
            "unread_count": unread_count(user["id"]),
        }

    @app.post(PREFIX + "/notifications/read-all")
    async def api_mark_all_read(slug: str, request: Request):
        user, _ = require_user(request, slug)
        return {"ok": True, "marked": mark_all_read(user["id"])}

    @app.post(PREFIX + "/notifications/{notification_id}/read")
    async def api_mark_read(slug: str, notification_id: str, request: Request):
        user, _ = require_user(request, slug)
        return {"ok": True, "notification": mark_read(user["id"], notification_id)}

    @app.post(PREFIX + "/notifications/scan")
    async def api_scan(slug: str, request: Request):
        _, company = require_user(request, slug, roles=ADMIN_ROLES)
        return {"ok": True, "created": scan_company(company)}
