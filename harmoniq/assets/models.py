"""
Harmoniq Safety - Asset models

Assets, inspections, downtime logs and corrective actions.
"""
import datetime
import logging
import random
import uuid
from typing import Dict, List, Optional

from ..common.text import sanitize_text
from ..db import _today, _ts, parse_dt
from ..directory.names import location_name, user_name
from ..errors import NotFound, ValidationError
from ..maintenance.schedule import is_overdue
from ..stores import get_store
from .alerts import compute_asset_alerts
from .health import compute_health

logger = logging.getLogger("harmoniq.assets")

CATEGORIES = (
    "machinery", "vehicle", "safety_equipment", "tool", "electrical", "hvac",
    "plumbing", "fire_safety", "lifting_equipment", "pressure_vessel", "ppe", "other",
)
ASSET_TYPES = ("static", "movable")
CRITICALITIES = ("critical", "high", "medium", "low")
CONDITIONS = ("excellent", "good", "fair", "poor", "failed")
STATUSES = ("active", "inactive", "maintenance", "retired")
INSPECTION_RESULTS = ("pass", "fail", "needs_attention")
DOWNTIME_CATEGORIES = ("breakdown", "maintenance", "safety", "external", "other")
PRODUCTION_IMPACTS = ("none", "partial", "full")
ACTION_STATUSES = ("open", "in_progress", "completed", "overdue")

ASSET_DEFAULTS = {
    "category": "other",
    "asset_type": "static",
    "criticality": "medium",
    "condition": "good",
    "status": "active",
    "currency": "USD",
}

ASSET_FIELDS = (
    "location_id", "parent_asset_id", "is_system",
    "name", "asset_tag", "serial_number", "barcode",
    "category", "sub_category", "asset_type", "criticality", "department",
    "manufacturer", "model", "model_number", "specifications",
    "manufactured_date", "purchase_date", "installation_date", "warranty_expiry",
    "expected_life_years",
    "condition", "condition_notes", "last_condition_assessment",
    "purchase_cost", "current_value", "depreciation_rate", "currency",
    "maintenance_frequency_days", "last_maintenance_date", "next_maintenance_date",
    "maintenance_notes",
    "requires_certification", "requires_calibration", "calibration_frequency_days",
    "last_calibration_date", "next_calibration_date", "safety_instructions",
    "status", "decommission_date", "disposal_method",
)

_CHOICES = {
    "category": CATEGORIES,
    "asset_type": ASSET_TYPES,
    "criticality": CRITICALITIES,
    "condition": CONDITIONS,
    "status": STATUSES,
}


def _validate_asset(data: Dict):
    for key, allowed in _CHOICES.items():
        if key in data and data[key] not in allowed:
            raise ValidationError(f"Invalid {key}: {data[key]}")
    for key in ("purchase_cost", "current_value", "depreciation_rate", "expected_life_years"):
        value = data.get(key)
        if value not in (None, ""):
            try:
                float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{key} must be a number")


# ================================================================
# ASSETS CRUD
# ================================================================

def get_assets(
    company_id: str, status: str = None, category: str = None,
    location_id: str = None, criticality: str = None, search: str = None,
    include_retired: bool = False,
) -> List[Dict]:
    assets = get_store("assets").items_for_company(company_id)
    if status:
        assets = [a for a in assets if a.get("status") == status]
    elif not include_retired:
        assets = [a for a in assets if a.get("status") != "retired"]
    if category:
        assets = [a for a in assets if a.get("category") == category]
    if location_id:
        assets = [a for a in assets if a.get("location_id") == location_id]
    if criticality:
        assets = [a for a in assets if a.get("criticality") == criticality]
    if search:
        s = search.lower()
        assets = [
            a for a in assets
            if any(s in str(a.get(k) or "").lower()
                   for k in ("name", "asset_tag", "serial_number", "manufacturer", "model"))
        ]
    return assets


def get_asset(company_id: str, asset_id: str) -> Dict:
    asset = get_store("assets").get_by_id(asset_id)
    if not asset or asset.get("company_id") != company_id:
        raise NotFound("Asset not found")
    return asset


def get_asset_by_qr(company_id: str, qr_code: str) -> Dict:
    asset = get_store("assets").find(company_id, qr_code=qr_code)
    if not asset:
        raise NotFound("Asset not found")
    return asset


def _next_asset_tag(company_id: str) -> str:
    existing = {a.get("asset_tag") for a in get_store("assets").items_for_company(company_id)}
    n = len(existing) + 1
    while f"AST-{n:04d}" in existing:
        n += 1
    return f"AST-{n:04d}"


def new_asset_record(company_id: str, data: Dict, default_currency: str = "USD") -> Dict:
    """Build a full asset record from partial input, filling defaults."""
    record = {key: None for key in ASSET_FIELDS}
    record.update({"is_system": False, "requires_certification": False, "requires_calibration": False})
    record.update(ASSET_DEFAULTS)
    record["currency"] = default_currency or ASSET_DEFAULTS["currency"]
    for key in ASSET_FIELDS:
        if key in data and data[key] not in (None, ""):
            record[key] = data[key]
    record["company_id"] = company_id
    record["name"] = sanitize_text(record.get("name"), 200)
    record["qr_code"] = str(uuid.uuid4())
    return record


def create_asset(company_id: str, data: Dict, default_currency: str = "USD") -> Dict:
    if not (data.get("name") or "").strip():
        raise ValidationError("Asset name is required")
    _validate_asset(data)
    store = get_store("assets")

    record = new_asset_record(company_id, data, default_currency)
    if not record.get("asset_tag"):
        record["asset_tag"] = _next_asset_tag(company_id)
    elif store.find(company_id, asset_tag=record["asset_tag"]):
        raise ValidationError(f"Asset tag {record['asset_tag']} already exists")

    if record.get("location_id"):
        loc = get_store("locations").get_by_id(record["location_id"])
        if not loc or loc.get("company_id") != company_id:
            raise ValidationError("Location not found")

    asset = store.add(record)
    logger.info("Asset %s (%s) created", asset["id"], asset["asset_tag"])
    return asset


def update_asset(company_id: str, asset_id: str, data: Dict) -> Dict:
    current = get_asset(company_id, asset_id)
    changes = {k: data[k] for k in ASSET_FIELDS if k in data}
    _validate_asset(changes)
    tag = changes.get("asset_tag")
    if tag and tag != current.get("asset_tag"):
        clash = get_store("assets").find(company_id, asset_tag=tag)
        if clash and clash["id"] != asset_id:
            raise ValidationError(f"Asset tag {tag} already exists")
    if changes.get("status") == "retired" and not current.get("decommission_date"):
        changes.setdefault("decommission_date", _today())
    return get_store("assets").update(asset_id, changes)


def delete_asset(company_id: str, asset_id: str) -> Dict:
    """Soft-delete: set status to retired."""
    get_asset(company_id, asset_id)
    return get_store("assets").update(asset_id, {"status": "retired", "decommission_date": _today()})


# ================================================================
# RELATED RECORDS
# ================================================================

def get_inspections(company_id: str, asset_id: str = None) -> List[Dict]:
    inspections = get_store("asset_inspections").items_for_company(company_id)
    if asset_id:
        inspections = [i for i in inspections if i.get("asset_id") == asset_id]
    inspections.sort(key=lambda i: i.get("inspected_at") or "", reverse=True)
    for insp in inspections:
        insp["inspector_name"] = user_name(insp.get("inspector_id"))
    return inspections


def get_asset_schedules(company_id: str, asset_id: str) -> List[Dict]:
    return get_store("maintenance_schedules").filter(company_id, asset_id=asset_id)


def get_downtime_logs(company_id: str, asset_id: str = None) -> List[Dict]:
    logs = get_store("downtime_logs").items_for_company(company_id)
    if asset_id:
        logs = [d for d in logs if d.get("asset_id") == asset_id]
    return sorted(logs, key=lambda d: d.get("start_date") or "", reverse=True)


def asset_health(company_id: str, asset_id: str, now: Optional[datetime.datetime] = None) -> Dict:
    asset = get_asset(company_id, asset_id)
    return compute_health(
        asset,
        get_store("asset_inspections").filter(company_id, asset_id=asset_id),
        get_asset_schedules(company_id, asset_id),
        get_store("downtime_logs").filter(company_id, asset_id=asset_id),
        now=now,
    )


def get_asset_detail(company_id: str, asset_id: str) -> Dict:
    asset = dict(get_asset(company_id, asset_id))
    asset["location_name"] = location_name(asset.get("location_id")) if asset.get("location_id") else None
    asset["inspections"] = get_inspections(company_id, asset_id)
    asset["schedules"] = get_asset_schedules(company_id, asset_id)
    asset["downtime_logs"] = get_downtime_logs(company_id, asset_id)
    asset["corrective_actions"] = get_corrective_actions(company_id, asset_id=asset_id)
    asset["components"] = get_store("assets").filter(company_id, parent_asset_id=asset_id)
    asset["health"] = asset_health(company_id, asset_id)
    asset["alerts"] = compute_asset_alerts([asset])
    return asset


# ================================================================
# INSPECTIONS
# ================================================================

def create_inspection(company_id: str, asset_id: str, inspector_id: str, data: Dict) -> Dict:
    """Record an inspection. Failed answers open corrective actions."""
    from ..checklists.templates import inspection_template_for

    asset = get_asset(company_id, asset_id)
    answers = data.get("answers") or {}
    if not isinstance(answers, dict):
        raise ValidationError("answers must be an object of item id to pass/fail/na")
    failed_items = [item_id for item_id, value in answers.items() if value == "fail"]

    result = data.get("result")
    if not result:
        result = "needs_attention" if failed_items else "pass"
    if result not in INSPECTION_RESULTS:
        raise ValidationError(f"Invalid inspection result: {result}")

    now = datetime.datetime.now()
    inspection = get_store("asset_inspections").add({
        "company_id": company_id,
        "asset_id": asset_id,
        "inspector_id": inspector_id,
        "reference_number": f"INS-{now.year}-{random.randint(1, 999):03d}",
        "checklist_id": data.get("checklist_id"),
        "result": result,
        "answers": answers,
        "notes": sanitize_text(data.get("notes")) or None,
        "media_urls": list(data.get("media_urls") or []),
        "incident_id": data.get("incident_id"),
        "inspected_at": _ts(),
    })

    asset_changes = {"last_condition_assessment": _today()}
    if data.get("condition") in CONDITIONS:
        asset_changes["condition"] = data["condition"]
    get_store("assets").update(asset_id, asset_changes)

    if result != "pass":
        labels = {item["id"]: item["label"] for item in inspection_template_for(asset.get("category"))["items"]}
        descriptions = [f"Failed: {labels.get(item_id, item_id)}" for item_id in failed_items]
        if not descriptions:
            descriptions = [inspection["notes"] or f"Inspection {result.replace('_', ' ')}: {asset['name']}"]
        for description in descriptions:
            create_corrective_action(company_id, {
                "asset_id": asset_id,
                "inspection_id": inspection["id"],
                "description": description,
                "severity": asset.get("criticality") or "medium",
            })
        logger.info("Inspection %s on %s opened %d corrective action(s)",
                    inspection["id"], asset_id, len(descriptions))
    return inspection


# ================================================================
# DOWNTIME
# ================================================================

def start_downtime(company_id: str, asset_id: str, reporter_id: str, data: Dict) -> Dict:
    get_asset(company_id, asset_id)
    if not (data.get("reason") or "").strip():
        raise ValidationError("Downtime reason is required")
    category = data.get("category", "breakdown")
    if category not in DOWNTIME_CATEGORIES:
        raise ValidationError(f"Invalid downtime category: {category}")
    impact = data.get("production_impact", "none")
    if impact not in PRODUCTION_IMPACTS:
        raise ValidationError(f"Invalid production impact: {impact}")

    open_log = next((d for d in get_store("downtime_logs").filter(company_id, asset_id=asset_id)
                     if not d.get("end_date")), None)
    if open_log:
        raise ValidationError("Asset already has an open downtime log")

    log = get_store("downtime_logs").add({
        "company_id": company_id,
        "asset_id": asset_id,
        "start_date": data.get("start_date") or _ts(),
        "end_date": None,
        "duration_hours": None,
        "reason": sanitize_text(data["reason"], 500),
        "category": category,
        "reported_by_user_id": reporter_id,
        "resolved_by_user_id": None,
        "production_impact": impact,
        "notes": data.get("notes"),
    })
    if data.get("set_maintenance_status", True):
        get_store("assets").update(asset_id, {"status": "maintenance"})
    return log


def end_downtime(company_id: str, log_id: str, resolver_id: str, data: Dict) -> Dict:
    log = get_store("downtime_logs").get_by_id(log_id)
    if not log or log.get("company_id") != company_id:
        raise NotFound("Downtime log not found")
    if log.get("end_date"):
        raise ValidationError("Downtime log already closed")
    end = parse_dt(data.get("end_date")) or datetime.datetime.now()
    start = parse_dt(log.get("start_date"))
    if start is None:
        raise ValidationError("Downtime log has no valid start date")
    if end < start:
        raise ValidationError("End date is before start date")
    hours = round((end - start).total_seconds() / 3600, 2)
    updated = get_store("downtime_logs").update(log_id, {
        "end_date": end.strftime("%Y-%m-%d %H:%M:%S"),
        "duration_hours": hours,
        "resolved_by_user_id": resolver_id,
        "notes": data.get("notes", log.get("notes")),
    })
    asset = get_store("assets").get_by_id(log["asset_id"])
    if asset and asset.get("status") == "maintenance":
        get_store("assets").update(asset["id"], {"status": "active"})
    return updated


# ================================================================
# CORRECTIVE ACTIONS
# ================================================================

def _effective_status(action: Dict, today: str) -> str:
    if action.get("status") in ("open", "in_progress") and (action.get("due_date") or "9999") < today:
        return "overdue"
    return action.get("status")


def get_corrective_actions(company_id: str, asset_id: str = None, status: str = None) -> List[Dict]:
    today = _today()
    actions = []
    for action in get_store("corrective_actions").items_for_company(company_id):
        if asset_id and action.get("asset_id") != asset_id:
            continue
        view = dict(action)
        view["status"] = _effective_status(action, today)
        view["assignee_name"] = user_name(action["assigned_to"]) if action.get("assigned_to") else "Unassigned"
        if status and view["status"] != status:
            continue
        actions.append(view)
    return sorted(actions, key=lambda a: a.get("due_date") or "")


def create_corrective_action(company_id: str, data: Dict) -> Dict:
    if not (data.get("description") or "").strip():
        raise ValidationError("Description is required")
    due = data.get("due_date") or (datetime.date.today() + datetime.timedelta(days=7)).isoformat()
    return get_store("corrective_actions").add({
        "company_id": company_id,
        "asset_id": data.get("asset_id"),
        "inspection_id": data.get("inspection_id"),
        "description": sanitize_text(data["description"], 1000),
        "severity": data.get("severity", "medium"),
        "assigned_to": data.get("assigned_to"),
        "due_date": due,
        "status": "open",
        "resolution_notes": None,
        "completed_at": None,
    })


def update_corrective_action(company_id: str, action_id: str, data: Dict) -> Dict:
    action = get_store("corrective_actions").get_by_id(action_id)
    if not action or action.get("company_id") != company_id:
        raise NotFound("Corrective action not found")
    changes = {k: data[k] for k in ("description", "severity", "assigned_to", "due_date", "resolution_notes") if k in data}
    status = data.get("status")
    if status:
        if status not in ACTION_STATUSES or status == "overdue":
            raise ValidationError(f"Invalid status: {status}")
        changes["status"] = status
        changes["completed_at"] = _ts() if status == "completed" else None
    return get_store("corrective_actions").update(action_id, changes)


# ================================================================
# DASHBOARD
# ================================================================

def get_asset_stats(company_id: str) -> Dict:
    assets = get_store("assets").items_for_company(company_id)
    live = [a for a in assets if a.get("status") != "retired"]
    by_status: Dict[str, int] = {}
    by_category: Dict[str, int] = {}
    for a in assets:
        by_status[a.get("status")] = by_status.get(a.get("status"), 0) + 1
    for a in live:
        by_category[a.get("category")] = by_category.get(a.get("category"), 0) + 1

    scores = [asset_health(company_id, a["id"])["score"] for a in live]
    schedules = [s for s in get_store("maintenance_schedules").items_for_company(company_id) if s.get("is_active", True)]
    open_actions = [a for a in get_corrective_actions(company_id) if a["status"] != "completed"]
    alerts = compute_asset_alerts(live)
    return {
        "total_assets": len(live),
        "by_status": by_status,
        "by_category": by_category,
        "average_health": round(sum(scores) / len(scores), 1) if scores else None,
        "overdue_schedules": sum(1 for s in schedules if is_overdue(s)),
        "open_corrective_actions": len(open_actions),
        "overdue_corrective_actions": sum(1 for a in open_actions if a["status"] == "overdue"),
        "critical_alerts": sum(1 for a in alerts if a["severity"] == "critical"),
    }
