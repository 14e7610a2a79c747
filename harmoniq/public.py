"""
Harmoniq Safety - Public API (no session required)
"""
import logging

from fastapi import APIRouter, Request

from .audit import client_meta, log_action
from .common.text import detect_locale, validate_contact

logger = logging.getLogger("harmoniq.public")

router = APIRouter(prefix="/api", tags=["public"])


@router.post("/contact")
async def api_contact(request: Request):
    data = await request.json()
    inquiry = validate_contact(data)
    logger.info("Contact inquiry from %s (%s)", inquiry["email"], inquiry["company"])
    log_action(None, None, "contact", "inquiry", None, new_values=inquiry, **client_meta(request))
    return {"ok": True, "message": "Thank you for your message. We will get back to you shortly."}


@router.get("/locale")
async def api_locale(request: Request):
    return {"ok": True, "locale": detect_locale(request.headers.get("accept-language"))}
