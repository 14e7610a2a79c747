"""
Harmoniq Safety - Maintenance schedules, logs and work orders
"""
import datetime
import logging
from typing import Dict, List, Optional

from ..common.text import sanitize_text
from ..db import _ts
from ..directory.names import asset_name, assignee_name, technician_name
from ..errors import NotFound, ValidationError
from ..stores import get_store
from .schedule import (
    FREQUENCY_UNITS, days_until_due, maintenance_compliance, next_due_from, schedule_state,
)

logger = logging.getLogger("harmoniq.maintenance")

PRIORITIES = ("low", "medium", "high", "critical")
SCHEDULE_DEFAULTS = {"frequency_value": 1, "frequency_unit": "months", "priority": "medium", "notify_days_before": 7}
WORK_ORDER_STATUSES = ("requested", "approved", "in_progress", "completed", "cancelled")

# Allowed forward moves; cancelled is reachable from any open state
WORK_ORDER_TRANSITIONS = {
    "requested": ("approved", "cancelled"),
    "approved": ("in_progress", "cancelled"),
    "in_progress": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}


# ================================================================
# SCHEDULES
# ================================================================

def _schedule_view(schedule: Dict) -> Dict:
    view = dict(schedule)
    view["state"] = schedule_state(schedule)
    view["days_until_due"] = days_until_due(schedule)
    view["asset_name"] = asset_name(schedule.get("asset_id"))
    view["assignee_name"] = assignee_name(schedule.get("assigned_to_user_id"), schedule.get("assigned_to_team_id"))
    return view


def _validate_schedule(data: Dict):
    if "frequency_unit" in data and data["frequency_unit"] not in FREQUENCY_UNITS:
        raise ValidationError(f"Invalid frequency unit: {data['frequency_unit']}")
    if "frequency_value" in data:
        try:
            value = int(data["frequency_value"])
        except (TypeError, ValueError):
            raise ValidationError("frequency_value must be a whole number")
        if value < 1:
            raise ValidationError("frequency_value must be at least 1")
    if "notify_days_before" in data:
        try:
            days = int(data["notify_days_before"])
        except (TypeError, ValueError):
            raise ValidationError("notify_days_before must be a whole number")
        if days < 0:
            raise ValidationError("notify_days_before cannot be negative")
    if "priority" in data and data["priority"] not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {data['priority']}")


def get_schedules(company_id: str, asset_id: str = None, state: str = None) -> List[Dict]:
    schedules = get_store("maintenance_schedules").items_for_company(company_id)
    if asset_id:
        schedules = [s for s in schedules if s.get("asset_id") == asset_id]
    views = [_schedule_view(s) for s in schedules]
    if state:
        views = [v for v in views if v["state"] == state]
    return sorted(views, key=lambda v: v.get("next_due_date") or "9999")


def get_schedule(company_id: str, schedule_id: str) -> Dict:
    schedule = get_store("maintenance_schedules").get_by_id(schedule_id)
    if not schedule or schedule.get("company_id") != company_id:
        raise NotFound("Maintenance schedule not found")
    return schedule


def create_schedule(company_id: str, asset_id: str, data: Dict) -> Dict:
    asset = get_store("assets").get_by_id(asset_id)
    if not asset or asset.get("company_id") != company_id:
        raise NotFound("Asset not found")
    if not (data.get("name") or "").strip():
        raise ValidationError("Schedule name is required")
    # Explicit nulls get the defaults too
    for key, default in SCHEDULE_DEFAULTS.items():
        if data.get(key) is None:
            data[key] = default
    _validate_schedule(data)

    next_due = data.get("next_due_date") or next_due_from(
        datetime.date.today(), data["frequency_value"], data["frequency_unit"]).isoformat()
    schedule = get_store("maintenance_schedules").add({
        "company_id": company_id,
        "asset_id": asset_id,
        "name": sanitize_text(data["name"], 200),
        "description": data.get("description"),
        "frequency_value": int(data["frequency_value"]),
        "frequency_unit": data["frequency_unit"],
        "last_completed_date": None,
        "next_due_date": next_due,
        "assigned_to_user_id": data.get("assigned_to_user_id"),
        "assigned_to_team_id": data.get("assigned_to_team_id"),
        "priority": data["priority"],
        "notify_days_before": int(data["notify_days_before"]),
        "is_active": bool(data.get("is_active", True)),
    })
    logger.info("Schedule %s created for asset %s", schedule["id"], asset_id)
    return schedule


def update_schedule(company_id: str, schedule_id: str, data: Dict) -> Dict:
    get_schedule(company_id, schedule_id)
    allowed = ("name", "description", "frequency_value", "frequency_unit", "next_due_date",
               "assigned_to_user_id", "assigned_to_team_id", "priority", "notify_days_before", "is_active")
    changes = {k: data[k] for k in allowed if k in data}
    _validate_schedule(changes)
    if "frequency_value" in changes:
        changes["frequency_value"] = int(changes["frequency_value"])
    if "notify_days_before" in changes:
        changes["notify_days_before"] = int(changes["notify_days_before"])
    return get_store("maintenance_schedules").update(schedule_id, changes)


def delete_schedule(company_id: str, schedule_id: str) -> bool:
    get_schedule(company_id, schedule_id)
    return get_store("maintenance_schedules").remove(schedule_id)


def complete_schedule(company_id: str, schedule_id: str, user_id: str, data: Optional[Dict] = None) -> Dict:
    """Log the work and roll the schedule forward from today."""
    data = data or {}
    schedule = get_schedule(company_id, schedule_id)
    today = datetime.date.today()
    next_due = next_due_from(today, schedule["frequency_value"], schedule["frequency_unit"])

    log = get_store("maintenance_logs").add({
        "company_id": company_id,
        "schedule_id": schedule_id,
        "asset_id": schedule["asset_id"],
        "performed_by_user_id": user_id,
        "performed_at": _ts(),
        "notes": sanitize_text(data.get("notes")) or None,
        "duration_minutes": data.get("duration_minutes"),
        "cost": data.get("cost"),
    })
    updated = get_store("maintenance_schedules").update(schedule_id, {
        "last_completed_date": today.isoformat(),
        "next_due_date": next_due.isoformat(),
    })
    get_store("assets").update(schedule["asset_id"], {
        "last_maintenance_date": today.isoformat(),
        "next_maintenance_date": next_due.isoformat(),
    })
    logger.info("Schedule %s completed, next due %s", schedule_id, next_due)
    return {"schedule": _schedule_view(updated), "log": log}


def get_maintenance_logs(company_id: str, asset_id: str = None) -> List[Dict]:
    logs = get_store("maintenance_logs").items_for_company(company_id)
    if asset_id:
        logs = [entry for entry in logs if entry.get("asset_id") == asset_id]
    return sorted(logs, key=lambda entry: entry.get("performed_at") or "", reverse=True)


def get_maintenance_overview(company_id: str) -> Dict:
    schedules = get_schedules(company_id)
    return {
        "schedules": schedules,
        "compliance": maintenance_compliance(schedules),
        "overdue": sum(1 for s in schedules if s["state"] == "overdue"),
        "due_soon": sum(1 for s in schedules if s["state"] == "due_soon"),
        "recent_logs": get_maintenance_logs(company_id)[:20],
    }


# ================================================================
# WORK ORDERS
# ================================================================

def _work_order_view(order: Dict) -> Dict:
    view = dict(order)
    view["technician_name"] = technician_name(order.get("assigned_to"))
    view["asset_name"] = asset_name(order.get("asset_id")) if order.get("asset_id") else None
    return view


def get_work_orders(company_id: str, status: str = None, assigned_to: str = None) -> List[Dict]:
    orders = get_store("work_orders").items_for_company(company_id)
    if status:
        orders = [o for o in orders if o.get("status") == status]
    if assigned_to:
        orders = [o for o in orders if o.get("assigned_to") == assigned_to]
    return [_work_order_view(o) for o in orders]


def get_work_order(company_id: str, order_id: str) -> Dict:
    order = get_store("work_orders").get_by_id(order_id)
    if not order or order.get("company_id") != company_id:
        raise NotFound("Work order not found")
    return order


def create_work_order(company_id: str, user_id: str, data: Dict) -> Dict:
    if not (data.get("title") or "").strip():
        raise ValidationError("Work order title is required")
    priority = data.get("priority", "medium")
    if priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {priority}")
    order = get_store("work_orders").add({
        "company_id": company_id,
        "asset_id": data.get("asset_id"),
        "title": sanitize_text(data["title"], 200),
        "description": data.get("description"),
        "priority": priority,
        "status": "requested",
        "requested_by": user_id,
        "assigned_to": data.get("assigned_to"),
        "due_date": data.get("due_date"),
        "estimated_hours": data.get("estimated_hours"),
        "actual_hours": None,
        "parts_cost": None,
        "labor_cost": None,
        "corrective_action_id": data.get("corrective_action_id"),
        "completed_at": None,
        "parts_used": [],
    })
    return _work_order_view(order)


def update_work_order(company_id: str, order_id: str, data: Dict) -> Dict:
    get_work_order(company_id, order_id)
    allowed = ("title", "description", "priority", "assigned_to", "due_date", "estimated_hours",
               "actual_hours", "parts_cost", "labor_cost", "parts_used")
    changes = {k: data[k] for k in allowed if k in data}
    if "priority" in changes and changes["priority"] not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {changes['priority']}")
    return _work_order_view(get_store("work_orders").update(order_id, changes))


def transition_work_order(company_id: str, order_id: str, new_status: str) -> Dict:
    order = get_work_order(company_id, order_id)
    if new_status not in WORK_ORDER_STATUSES:
        raise ValidationError(f"Invalid status: {new_status}")
    current = order.get("status")
    if new_status not in WORK_ORDER_TRANSITIONS.get(current, ()):
        raise ValidationError(f"Cannot move work order from {current} to {new_status}")
    changes = {"status": new_status}
    if new_status == "completed":
        changes["completed_at"] = _ts()
        if order.get("corrective_action_id"):
            get_store("corrective_actions").update(order["corrective_action_id"], {
                "status": "completed", "completed_at": _ts(),
                "resolution_notes": f"Closed by work order {order_id}",
            })
    logger.info("Work order %s: %s -> %s", order_id, current, new_status)
    return _work_order_view(get_store("work_orders").update(order_id, changes))


def work_order_summary(company_id: str) -> Dict[str, int]:
    counts = {status: 0 for status in WORK_ORDER_STATUSES}
    for order in get_store("work_orders").items_for_company(company_id):
        counts[order.get("status")] = counts.get(order.get("status"), 0) + 1
    return counts
