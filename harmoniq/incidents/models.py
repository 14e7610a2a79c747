"""
Harmoniq Safety - Incident and ticket records
"""
import logging
import time
from typing import Dict, List, Optional

from ..auth.permissions import has_permission
from ..common.dates import is_within_date_range
from ..common.text import sanitize_text
from ..db import _ts
from ..directory.names import location_name, user_name
from ..errors import NotFound, PermissionDenied, ValidationError
from ..stores import get_store

logger = logging.getLogger("harmoniq.incidents")

INCIDENT_TYPES = (
    "injury", "near_miss", "equipment_failure", "environmental", "fire",
    "security", "spill", "hazard", "property_damage", "other",
)
SEVERITIES = ("low", "medium", "high", "critical")
INCIDENT_STATUSES = ("new", "in_progress", "in_review", "resolved", "archived")
OPEN_STATUSES = ("new", "in_progress")
TICKET_STATUSES = ("new", "in_progress", "blocked", "waiting", "resolved", "closed")

EDITABLE_FIELDS = (
    "type", "type_other", "severity", "priority", "title", "description",
    "incident_date", "incident_time", "lost_time", "lost_time_amount", "active_hazard",
    "location_id", "building", "floor", "zone", "room", "gps_lat", "gps_lng",
    "location_description", "asset_id", "media_urls", "flagged",
)


def type_label(incident_type: str) -> str:
    return " ".join(part.capitalize() for part in (incident_type or "other").split("_"))


def _ms_suffix(digits: int = 6) -> str:
    return str(int(time.time() * 1000))[-digits:]


def next_reference_number(company_id: str) -> str:
    """INC-<last six digits of the ms clock>, bumped past any clash."""
    store = get_store("incidents")
    n = int(_ms_suffix())
    while store.find(company_id, reference_number=f"INC-{n:06d}"):
        n = (n + 1) % 1000000
    return f"INC-{n:06d}"


def _validate(data: Dict):
    if data.get("type") is not None and data["type"] not in INCIDENT_TYPES:
        raise ValidationError(f"Invalid incident type: {data['type']}")
    for key in ("severity", "priority"):
        if data.get(key) is not None and data[key] not in SEVERITIES:
            raise ValidationError(f"Invalid {key}: {data[key]}")


# ================================================================
# VISIBILITY
# ================================================================

def _team_mates(user: Dict) -> set:
    team_ids = set(user.get("team_ids") or [])
    if not team_ids:
        return {user["id"]}
    mates = {user["id"]}
    for other in get_store("users").items_for_company(user.get("company_id")):
        if team_ids & set(other.get("team_ids") or []):
            mates.add(other["id"])
    return mates


def can_view(user: Dict, incident: Dict) -> bool:
    if has_permission(user, "incidents.view_all"):
        return True
    if incident.get("reporter_id") == user["id"]:
        return True
    if has_permission(user, "incidents.view_team"):
        return incident.get("reporter_id") in _team_mates(user)
    return False


def can_edit(user: Dict, incident: Dict) -> bool:
    if has_permission(user, "incidents.edit_all"):
        return True
    return has_permission(user, "incidents.edit_own") and incident.get("reporter_id") == user["id"]


def visible_incidents(user: Dict, company_id: str) -> List[Dict]:
    incidents = get_store("incidents").items_for_company(company_id)
    if has_permission(user, "incidents.view_all"):
        return incidents
    if has_permission(user, "incidents.view_team"):
        mates = _team_mates(user)
        return [i for i in incidents if i.get("reporter_id") in mates]
    return [i for i in incidents if i.get("reporter_id") == user["id"]]


# ================================================================
# INCIDENTS
# ================================================================

def list_incidents(
    user: Dict, company_id: str, status: str = None, severity: str = None,
    incident_type: str = None, location_id: str = None, search: str = None,
    date_range: str = None, custom_start: str = None, custom_end: str = None,
) -> List[Dict]:
    incidents = visible_incidents(user, company_id)
    if status:
        incidents = [i for i in incidents if i.get("status") == status]
    if severity:
        incidents = [i for i in incidents if i.get("severity") == severity]
    if incident_type:
        incidents = [i for i in incidents if i.get("type") == incident_type]
    if location_id:
        incidents = [i for i in incidents if i.get("location_id") == location_id]
    if search:
        s = search.lower()
        incidents = [i for i in incidents
                     if s in (i.get("title") or "").lower()
                     or s in (i.get("reference_number") or "").lower()
                     or s in (i.get("description") or "").lower()]
    if date_range:
        incidents = [i for i in incidents
                     if is_within_date_range(i.get("incident_date"), date_range, custom_start, custom_end)]
    incidents.sort(key=lambda i: i.get("created_at") or "", reverse=True)
    for incident in incidents:
        incident["reporter_name"] = user_name(incident.get("reporter_id"))
        incident["location_name"] = location_name(incident.get("location_id")) if incident.get("location_id") else None
    return incidents


def get_incident(company_id: str, incident_id: str, user: Optional[Dict] = None) -> Dict:
    incident = get_store("incidents").get_by_id(incident_id)
    if not incident or incident.get("company_id") != company_id:
        raise NotFound("Incident not found")
    if user is not None and not can_view(user, incident):
        raise NotFound("Incident not found")
    return incident


def create_incident(company_id: str, reporter: Dict, data: Dict) -> Dict:
    if not (data.get("title") or "").strip():
        raise ValidationError("Incident title is required")
    if not data.get("type"):
        raise ValidationError("Incident type is required")
    _validate(data)
    now = _ts()
    severity = data.get("severity", "medium")
    record = {key: None for key in EDITABLE_FIELDS}
    record.update({
        "lost_time": False, "active_hazard": False, "flagged": False, "media_urls": [],
    })
    record.update({k: data[k] for k in EDITABLE_FIELDS if k in data})
    record.update({
        "company_id": company_id,
        "reference_number": next_reference_number(company_id),
        "reporter_id": reporter["id"],
        "title": sanitize_text(data["title"], 200),
        "description": sanitize_text(data.get("description"), 5000),
        "severity": severity,
        "priority": data.get("priority") or severity,
        "incident_date": data.get("incident_date") or now[:10],
        "incident_time": data.get("incident_time") or now[11:16],
        "status": "new",
        "resolved_at": None,
        "resolved_by": None,
        "resolution_notes": None,
        "investigation": None,
        "actions": [],
        "comments": [],
        "timeline": [],
    })
    incident = get_store("incidents").add(record)
    logger.info("Incident %s (%s) reported by %s", incident["id"], incident["reference_number"], reporter["id"])
    return incident


def update_incident(company_id: str, incident_id: str, user: Dict, data: Dict) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    if not can_edit(user, incident):
        raise PermissionDenied("Cannot edit this incident")
    changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    _validate(changes)
    if "title" in changes:
        if not (changes["title"] or "").strip():
            raise ValidationError("Incident title is required")
        changes["title"] = sanitize_text(changes["title"], 200)
    return get_store("incidents").update(incident_id, changes)


def delete_incident(company_id: str, incident_id: str) -> bool:
    get_incident(company_id, incident_id)
    for ticket in get_store("tickets").items_for_company(company_id):
        if incident_id in (ticket.get("incident_ids") or []):
            remaining = [i for i in ticket["incident_ids"] if i != incident_id]
            get_store("tickets").update(ticket["id"], {"incident_ids": remaining})
    return get_store("incidents").remove(incident_id)


# ================================================================
# TICKETS
# ================================================================

def next_ticket_id() -> str:
    store = get_store("tickets")
    n = int(time.time() * 1000)
    while store.get_by_id(f"TKT-{n}"):
        n += 1
    return f"TKT-{n}"


def list_tickets(company_id: str, status: str = None, incident_id: str = None) -> List[Dict]:
    tickets = get_store("tickets").items_for_company(company_id)
    if status:
        tickets = [t for t in tickets if t.get("status") == status]
    if incident_id:
        tickets = [t for t in tickets if incident_id in (t.get("incident_ids") or [])]
    for ticket in tickets:
        ticket["assignee_name"] = user_name(ticket["assigned_to"]) if ticket.get("assigned_to") else "Unassigned"
    return tickets


def get_ticket(company_id: str, ticket_id: str) -> Dict:
    ticket = get_store("tickets").get_by_id(ticket_id)
    if not ticket or ticket.get("company_id") != company_id:
        raise NotFound("Ticket not found")
    return ticket


def create_ticket(company_id: str, user_id: str, data: Dict, ticket_id: str = None) -> Dict:
    if not (data.get("title") or "").strip():
        raise ValidationError("Ticket title is required")
    status = data.get("status", "new")
    if status not in TICKET_STATUSES:
        raise ValidationError(f"Invalid ticket status: {status}")
    incident_ids = list(data.get("incident_ids") or [])
    for incident_id in incident_ids:
        get_incident(company_id, incident_id)
    return get_store("tickets").add({
        "id": ticket_id or next_ticket_id(),
        "company_id": company_id,
        "title": sanitize_text(data["title"], 200),
        "description": data.get("description"),
        "priority": data.get("priority", "medium"),
        "status": status,
        "due_date": data.get("due_date"),
        "assigned_to": data.get("assigned_to"),
        "assigned_groups": list(data.get("assigned_groups") or []),
        "incident_ids": incident_ids,
        "created_by": user_id,
    })


def update_ticket(company_id: str, ticket_id: str, data: Dict) -> Dict:
    get_ticket(company_id, ticket_id)
    allowed = ("title", "description", "priority", "status", "due_date", "assigned_to",
               "assigned_groups", "incident_ids")
    changes = {k: data[k] for k in allowed if k in data}
    if "status" in changes and changes["status"] not in TICKET_STATUSES:
        raise ValidationError(f"Invalid ticket status: {changes['status']}")
    return get_store("tickets").update(ticket_id, changes)
