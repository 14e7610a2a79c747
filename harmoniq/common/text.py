"""
Harmoniq Safety - Text validation and sanitising
"""
import re
from typing import Dict, Optional

from ..errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

SUPPORTED_LOCALES = ("en", "nl", "sv")


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and bool(EMAIL_RE.match(value))


def strip_tags(value: str) -> str:
    return _TAG_RE.sub("", value or "")


def sanitize_text(value, max_length: int = 5000) -> str:
    """Drop control characters, trim whitespace and cap the length."""
    if value is None:
        return ""
    text = _CONTROL_RE.sub("", str(value)).strip()
    return text[:max_length]


def detect_locale(accept_language: Optional[str]) -> str:
    """Pick sv or nl from an Accept-Language header, falling back to en."""
    if not accept_language:
        return "en"
    for part in accept_language.lower().split(","):
        lang = part.split(";")[0].strip()
        if lang.startswith("sv"):
            return "sv"
        if lang.startswith("nl"):
            return "nl"
    return "en"


def validate_contact(data: Dict) -> Dict:
    """Validate a contact-form payload and return the cleaned inquiry."""
    name = sanitize_text(data.get("name"), 200)
    email = sanitize_text(data.get("email"), 320)
    message = sanitize_text(data.get("message"))
    if not name or not email or not message:
        raise ValidationError("Name, email, and message are required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email address")
    return {
        "name": name,
        "email": email,
        "company": sanitize_text(data.get("company"), 200) or "N/A",
        "message": strip_tags(message)[:500],
    }
