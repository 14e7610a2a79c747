"""
Harmoniq Safety - Checklist templates

Company checklist templates plus the built-in asset inspection templates
(one per asset category).
"""
import logging
import uuid
from typing import Dict, List, Optional

from ..common.text import sanitize_text
from ..errors import NotFound, ValidationError
from ..stores import get_store

logger = logging.getLogger("harmoniq.checklists")

ITEM_TYPES = ("yes_no_na", "pass_fail", "rating", "text")
RECURRENCES = ("daily", "weekly", "monthly", "once")
ASSIGNMENTS = ("all", "department", "role")

NOTES_LABEL = "Notes / observations"
CONDITION_SCALE = ["Poor", "Fair", "Good", "Excellent"]


def _items(prefix: str, labels: List[str], extra: Optional[List[Dict]] = None) -> List[Dict]:
    """Numbered checkbox items, then any extra items, then a free-text notes item."""
    items = [
        {"id": f"{prefix}{n}", "label": label, "type": "checkbox", "required": True}
        for n, label in enumerate(labels, start=1)
    ]
    for entry in extra or []:
        items.append(dict(entry, id=f"{prefix}{len(items) + 1}"))
    items.append({"id": f"{prefix}{len(items) + 1}", "label": NOTES_LABEL, "type": "text", "required": False})
    return items


INSPECTION_TEMPLATES: Dict[str, List[Dict]] = {
    "machinery": _items("m", [
        "Visual condition - no damage or corrosion",
        "Guards and safety covers in place",
        "Emergency stop functional",
        "Lubrication adequate",
        "No abnormal noise or vibration",
    ], [{"label": "Condition rating", "type": "rating", "required": True, "options": CONDITION_SCALE}]),
    "vehicle": _items("v", [
        "Exterior condition - no damage",
        "Lights functional (headlights, indicators, brake)",
        "Tires - adequate tread and pressure",
        "Brakes functional",
        "Fluid levels adequate (oil, coolant, washer)",
        "First aid kit present",
        "Fire extinguisher present and valid",
    ], [{"label": "Mileage / odometer reading", "type": "number", "required": True}]),
    "safety_equipment": _items("s", [
        "Equipment accessible and clearly marked",
        "No visible damage or tampering",
        "Operational (test if applicable)",
        "Within expiry/service date",
    ]),
    "tool": _items("t", [
        "Clean and free of damage",
        "Electrically safe (cord, plug)",
        "Guards and safety features intact",
        "Stored correctly",
    ]),
    "electrical": _items("e", [
        "No exposed wiring or damage",
        "Panels accessible and labeled",
        "GFCI/RCD functional (test button)",
        "No signs of overheating or burning",
    ]),
    "hvac": _items("h", [
        "Filters clean or replaced",
        "No unusual noises",
        "Thermostat functioning",
        "Vents unobstructed",
    ]),
    "plumbing": _items("p", [
        "No leaks or drips",
        "Water pressure adequate",
        "Drains flowing freely",
        "Hot water functional",
    ]),
    "fire_safety": _items("f", [
        "Fire extinguisher charged (gauge in green)",
        "Extinguisher accessible and signage visible",
        "Safety seal intact",
        "Last service date within 1 year",
        "Fire alarm tested",
        "Emergency exit signs illuminated",
    ]),
    "lifting_equipment": _items("l", [
        "Load rating label visible",
        "No cracks, deformation or wear",
        "Hooks and latches functional",
        "Chains/slings in good condition",
        "Certification current",
    ]),
    "pressure_vessel": _items("pv", [
        "Pressure gauge functional and in range",
        "Safety valve operational",
        "No visible corrosion or damage",
        "Certification current",
    ]),
    "ppe": _items("pp", [
        "Clean and hygienic",
        "No damage or excessive wear",
        "Fits correctly",
        "Within expiry date (if applicable)",
        "Stored correctly",
    ]),
    "other": _items("o", [
        "Visual inspection - condition acceptable",
        "Functional (if applicable)",
        "Safety concerns identified",
    ]),
}

DEFAULT_INSPECTION_ITEMS = [
    {"id": "visual", "label": "Visual inspection - no visible damage or wear", "type": "checkbox", "required": True},
    {"id": "safety_guards", "label": "Safety guards are in place and functional", "type": "checkbox", "required": True},
    {"id": "controls", "label": "Controls and switches work properly", "type": "checkbox", "required": True},
    {"id": "leaks", "label": "No fluid leaks or spills", "type": "checkbox", "required": True},
    {"id": "labels", "label": "Warning labels are visible and legible", "type": "checkbox", "required": True},
    {"id": "notes", "label": NOTES_LABEL, "type": "text", "required": False},
]


def inspection_template_for(category: Optional[str]) -> Dict:
    """Inspection items for an asset category; unknown categories get the generic list."""
    items = INSPECTION_TEMPLATES.get(category or "")
    if items is None:
        return {"category": category, "is_default": True, "items": [dict(i) for i in DEFAULT_INSPECTION_ITEMS]}
    return {"category": category, "is_default": False, "items": [dict(i) for i in items]}


# ================================================================
# COMPANY TEMPLATES
# ================================================================

def _clean_items(items) -> List[Dict]:
    if not isinstance(items, list) or not items:
        raise ValidationError("A checklist needs at least one item")
    cleaned = []
    for order, item in enumerate(items, start=1):
        question = sanitize_text((item or {}).get("question"), 500)
        if not question:
            raise ValidationError(f"Item {order} has no question")
        item_type = item.get("type", "yes_no_na")
        if item_type not in ITEM_TYPES:
            raise ValidationError(f"Invalid item type: {item_type}")
        cleaned.append({
            "id": item.get("id") or f"q{uuid.uuid4().hex[:8]}",
            "question": question,
            "type": item_type,
            "required": bool(item.get("required", True)),
            "order": order,
        })
    return cleaned


def list_templates(company_id: str, active_only: bool = False) -> List[Dict]:
    templates = get_store("checklist_templates").items_for_company(company_id)
    if active_only:
        templates = [t for t in templates if t.get("is_active", True)]
    return templates


def get_template(company_id: str, template_id: str) -> Dict:
    template = get_store("checklist_templates").get_by_id(template_id)
    if not template or template.get("company_id") != company_id:
        raise NotFound("Checklist template not found")
    return template


def create_template(company_id: str, data: Dict) -> Dict:
    name = sanitize_text(data.get("name"), 200)
    if not name:
        raise ValidationError("Template name is required")
    recurrence = data.get("recurrence", "once")
    if recurrence not in RECURRENCES:
        raise ValidationError(f"Invalid recurrence: {recurrence}")
    assignment = data.get("assignment", "all")
    if assignment not in ASSIGNMENTS:
        raise ValidationError(f"Invalid assignment: {assignment}")
    template = get_store("checklist_templates").add({
        "company_id": company_id,
        "name": name,
        "description": data.get("description"),
        "category": data.get("category"),
        "assignment": assignment,
        "recurrence": recurrence,
        "items": _clean_items(data.get("items")),
        "is_active": bool(data.get("is_active", True)),
    })
    logger.info("Checklist template %s created (%d items)", template["id"], len(template["items"]))
    return template


def update_template(company_id: str, template_id: str, data: Dict) -> Dict:
    get_template(company_id, template_id)
    changes = {k: data[k] for k in ("name", "description", "category", "assignment", "recurrence", "is_active")
               if k in data}
    if "name" in changes:
        changes["name"] = sanitize_text(changes["name"], 200)
        if not changes["name"]:
            raise ValidationError("Template name is required")
    if "recurrence" in changes and changes["recurrence"] not in RECURRENCES:
        raise ValidationError(f"Invalid recurrence: {changes['recurrence']}")
    if "assignment" in changes and changes["assignment"] not in ASSIGNMENTS:
        raise ValidationError(f"Invalid assignment: {changes['assignment']}")
    if "items" in data:
        changes["items"] = _clean_items(data["items"])
    return get_store("checklist_templates").update(template_id, changes)


def delete_template(company_id: str, template_id: str) -> Dict:
    """Templates with submissions are deactivated rather than removed."""
    get_template(company_id, template_id)
    if get_store("checklist_submissions").find(company_id, template_id=template_id):
        get_store("checklist_templates").update(template_id, {"is_active": False})
        return {"deleted": False, "deactivated": True}
    get_store("checklist_templates").remove(template_id)
    return {"deleted": True, "deactivated": False}
