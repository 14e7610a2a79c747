"""
Harmoniq Safety - Session API
"""
import logging

from fastapi import APIRouter, Request

from ..audit import client_meta, log_action
from ..db import _ts
from ..errors import NotAuthenticated, ValidationError
from ..stores import get_store
from .permissions import permissions_for
from .session import session_user

logger = logging.getLogger("harmoniq.auth")

router = APIRouter(prefix="/api/session", tags=["session"])


def _session_payload(user, company):
    return {
        "user_id": user["id"],
        "name": user.get("full_name"),
        "email": user.get("email"),
        "role": user.get("role"),
        "company_id": user.get("company_id"),
        "company_slug": company.get("slug") if company else None,
        "permissions": permissions_for(user),
    }


@router.post("/login")
async def login(request: Request):
    data = await request.json()
    email = (data.get("email") or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")

    users = get_store("users")
    user = next((u for u in users.items() if (u.get("email") or "").lower() == email), None)
    if not user or user.get("status") == "inactive":
        logger.warning("Login rejected for %s", email)
        raise NotAuthenticated("Unknown or inactive account")

    users.update(user["id"], {"last_login_at": _ts()})
    company = get_store("companies").get_by_id(user.get("company_id"))

    request.session["user_id"] = user["id"]
    request.session["company_id"] = user.get("company_id")
    request.session["role"] = user.get("role")
    log_action(user.get("company_id"), user["id"], "login", "user", user["id"], **client_meta(request))
    logger.info("User %s logged in", user["id"])
    return {"ok": True, **_session_payload(user, company)}


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/status")
async def status(request: Request):
    user = session_user(request)
    if user is None:
        return {"ok": True, "logged_in": False}
    company = get_store("companies").get_by_id(user.get("company_id"))
    return {"ok": True, "logged_in": True, **_session_payload(user, company)}
