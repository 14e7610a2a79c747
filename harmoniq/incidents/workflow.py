"""
Harmoniq Safety - Incident workflow

Status changes, investigation, corrective/preventive actions, comments and
the merged timeline. Every function loads the incident, applies one change
and writes it back through the incidents store.
"""
import datetime
import logging
import time
from typing import Dict, List

from ..common.text import sanitize_text
from ..db import _ts, parse_dt
from ..directory.names import display_name, user_name
from ..errors import ValidationError
from ..stores import get_store
from .models import INCIDENT_STATUSES, create_ticket, get_incident

logger = logging.getLogger("harmoniq.incidents.workflow")

STATUS_LABELS = {
    "new": "New",
    "in_progress": "In Progress",
    "in_review": "In Review",
    "resolved": "Resolved",
    "archived": "Archived",
}
ACTION_TYPES = ("corrective", "preventive")
ACTION_TICKET_STATUSES = ("open", "in_progress", "resolved")
ROOT_CAUSE_CATEGORIES = (
    "human_error", "equipment_failure", "procedure", "training", "environment",
    "management", "communication", "other",
)
INVESTIGATION_FIELDS = (
    "rootCauseCategory", "rootCauseOther", "rootCauseDescription",
    "contributingFactors", "lessonsLearned", "notes", "attachments", "status",
)


def _iso_now() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")


def _save(incident_id: str, changes: Dict) -> Dict:
    return get_store("incidents").update(incident_id, changes)


def _event(kind: str, description: str, user: str) -> Dict:
    return {"type": kind, "description": description, "user": user, "date": _iso_now()}


def action_status_for_ticket(ticket_status: str) -> str:
    if ticket_status == "resolved":
        return "completed"
    if ticket_status == "in_progress":
        return "in_progress"
    return "pending"


def can_close(incident: Dict) -> bool:
    """Every action is completed. An incident without actions may close."""
    return all(a.get("status") == "completed" for a in incident.get("actions") or [])


# ================================================================
# STATUS
# ================================================================

def change_status(company_id: str, incident_id: str, user: Dict, new_status: str,
                  resolution_notes: str = None) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    if new_status not in INCIDENT_STATUSES:
        raise ValidationError(f"Invalid status: {new_status}")
    old_status = incident.get("status")
    if new_status == old_status:
        return incident
    if new_status == "resolved" and not can_close(incident):
        open_count = sum(1 for a in incident["actions"] if a.get("status") != "completed")
        raise ValidationError(f"Cannot resolve: {open_count} action(s) still open")

    changes = {"status": new_status}
    if new_status == "resolved":
        changes["resolved_at"] = _ts()
        changes["resolved_by"] = user["id"]
        if resolution_notes:
            changes["resolution_notes"] = sanitize_text(resolution_notes, 2000)
    elif old_status == "resolved" and new_status != "archived":
        changes["resolved_at"] = None
        changes["resolved_by"] = None

    timeline = list(incident.get("timeline") or [])
    timeline.append(_event("status", f"Status changed to {STATUS_LABELS[new_status]}", display_name(user)))
    changes["timeline"] = timeline
    logger.info("Incident %s: %s -> %s by %s", incident_id, old_status, new_status, user["id"])
    return _save(incident_id, changes)


# ================================================================
# INVESTIGATION
# ================================================================

def start_investigation(company_id: str, incident_id: str, user: Dict, investigator: str) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    if not investigator:
        raise ValidationError("Investigator is required")
    if incident.get("investigation"):
        raise ValidationError("Investigation already started")
    investigation = {
        "investigator": investigator,
        "startDate": _iso_now(),
        "status": "in_progress",
        "rootCauseCategory": "",
        "rootCauseOther": "",
        "rootCauseDescription": "",
        "contributingFactors": [],
        "lessonsLearned": "",
        "witnesses": [],
        "notes": "",
        "attachments": [],
    }
    changes = {"investigation": investigation}
    if incident.get("status") == "new":
        changes["status"] = "in_progress"
        timeline = list(incident.get("timeline") or [])
        timeline.append(_event("status", "Status changed to In Progress", display_name(user)))
        changes["timeline"] = timeline
    return _save(incident_id, changes)


def update_investigation(company_id: str, incident_id: str, user: Dict, data: Dict) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    investigation = incident.get("investigation")
    if not investigation:
        raise ValidationError("Investigation has not been started")
    category = data.get("rootCauseCategory")
    if category and category not in ROOT_CAUSE_CATEGORIES:
        raise ValidationError(f"Invalid root cause category: {category}")
    if "status" in data and data["status"] not in ("in_progress", "completed"):
        raise ValidationError(f"Invalid investigation status: {data['status']}")
    merged = dict(investigation)
    merged.update({k: data[k] for k in INVESTIGATION_FIELDS if k in data})
    return _save(incident_id, {"investigation": merged})


def add_witness(company_id: str, incident_id: str, user: Dict, name: str, statement: str) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    investigation = incident.get("investigation")
    if not investigation:
        raise ValidationError("Investigation has not been started")
    if not (name or "").strip() or not (statement or "").strip():
        raise ValidationError("Witness name and statement are required")
    merged = dict(investigation)
    merged["witnesses"] = list(investigation.get("witnesses") or []) + [{
        "name": sanitize_text(name, 200),
        "statement": sanitize_text(statement, 5000),
        "date": _iso_now(),
    }]
    return _save(incident_id, {"investigation": merged})


# ================================================================
# ACTIONS
# ================================================================

def add_action(company_id: str, incident_id: str, user: Dict, data: Dict) -> Dict:
    """Attach a corrective or preventive action and open its ticket."""
    incident = get_incident(company_id, incident_id, user)
    if not data.get("title") or not data.get("assignee") or not data.get("dueDate"):
        raise ValidationError("Action title, assignee and due date are required")
    action_type = data.get("actionType", "corrective")
    if action_type not in ACTION_TYPES:
        raise ValidationError(f"Invalid action type: {action_type}")

    stamp = int(time.time() * 1000)
    existing = {a["id"] for a in incident.get("actions") or []}
    while f"act-{stamp}" in existing:
        stamp += 1
    ticket = create_ticket(company_id, user["id"], {
        "title": data["title"],
        "description": data.get("description"),
        "priority": data.get("priority", "medium"),
        "due_date": data["dueDate"],
        "incident_ids": [incident_id],
    })
    action = {
        "id": f"act-{stamp}",
        "title": sanitize_text(data["title"], 200),
        "description": data.get("description", ""),
        "priority": data.get("priority", "medium"),
        "dueDate": data["dueDate"],
        "status": "pending",
        "ticketId": ticket["id"],
        "ticketStatus": "open",
        "assignee": data["assignee"],
        "createdAt": _iso_now(),
        "createdBy": display_name(user),
        "actionType": action_type,
    }
    actions = list(incident.get("actions") or []) + [action]
    _save(incident_id, {"actions": actions})
    return action


def set_action_ticket_status(company_id: str, incident_id: str, user: Dict, action_id: str,
                             ticket_status: str, notes: str = None) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    if ticket_status not in ACTION_TICKET_STATUSES:
        raise ValidationError(f"Invalid ticket status: {ticket_status}")
    actions = []
    updated = None
    for action in incident.get("actions") or []:
        if action["id"] == action_id:
            action = dict(action)
            action["ticketStatus"] = ticket_status
            action["status"] = action_status_for_ticket(ticket_status)
            if notes:
                action["resolutionNotes"] = notes
            updated = action
        actions.append(action)
    if updated is None:
        raise ValidationError(f"Action {action_id} not found on incident")
    _save(incident_id, {"actions": actions})

    ticket = get_store("tickets").get_by_id(updated.get("ticketId"))
    if ticket:
        get_store("tickets").update(ticket["id"], {"status": "new" if ticket_status == "open" else ticket_status})
    return updated


# ================================================================
# COMMENTS & TIMELINE
# ================================================================

def add_comment(company_id: str, incident_id: str, user: Dict, text: str) -> Dict:
    incident = get_incident(company_id, incident_id, user)
    text = sanitize_text(text, 2000)
    if not text:
        raise ValidationError("Comment text is required")
    comment = {
        "id": f"cmt-{int(time.time() * 1000)}",
        "user": display_name(user),
        "user_id": user["id"],
        "text": text,
        "date": _iso_now(),
    }
    _save(incident_id, {"comments": list(incident.get("comments") or []) + [comment]})
    return comment


def _sort_key(event: Dict):
    return parse_dt(event.get("date")) or datetime.datetime.min


def build_timeline(incident: Dict) -> List[Dict]:
    """Created, status, investigation, action and comment events, oldest first."""
    events = [{
        "type": "created",
        "description": "Incident reported",
        "user": user_name(incident.get("reporter_id")) if incident.get("reporter_id") else "System",
        "date": incident.get("created_at") or incident.get("incident_date"),
    }]
    events.extend(e for e in incident.get("timeline") or [] if e.get("type") == "status")

    investigation = incident.get("investigation")
    if investigation:
        investigator = investigation.get("investigator")
        name = user_name(investigator) if get_store("users").get_by_id(investigator) else (investigator or "Investigator")
        events.append({
            "type": "investigation",
            "description": "Investigation started",
            "user": name,
            "date": investigation.get("startDate"),
        })
    for action in incident.get("actions") or []:
        events.append({
            "type": "action",
            "description": f"Action created: {action.get('title')}",
            "user": action.get("createdBy") or "Safety Manager",
            "date": action.get("createdAt"),
        })
    for comment in incident.get("comments") or []:
        text = comment.get("text") or ""
        events.append({
            "type": "comment",
            "description": text[:50] + ("..." if len(text) > 50 else ""),
            "user": comment.get("user"),
            "date": comment.get("date"),
        })
    events.sort(key=_sort_key)
    return events
