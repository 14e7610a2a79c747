"""
Harmoniq Safety - Maintenance & asset alert scan

Turns due/overdue maintenance schedules and critical asset alerts into
notifications. Each (user, key) pair is notified at most once a day, so the
scan is safe to run as often as the scheduler likes.
"""
import datetime
import logging
from typing import Dict, List, Optional

from ..assets.alerts import compute_asset_alerts
from ..directory.names import asset_name
from ..maintenance.schedule import schedule_state
from ..stores import get_store
from .models import create_notification

logger = logging.getLogger("harmoniq.notifications.scan")


def schedule_recipients(schedule: Dict) -> List[str]:
    """Assigned user, or every member of the assigned team."""
    if schedule.get("assigned_to_user_id"):
        return [schedule["assigned_to_user_id"]]
    team = get_store("teams").get_by_id(schedule.get("assigned_to_team_id"))
    if team:
        return list(team.get("member_ids") or [])
    return []


def company_admins(company_id: str) -> List[str]:
    return [
        u["id"] for u in get_store("users").items_for_company(company_id)
        if u.get("role") == "company_admin" and u.get("status", "active") == "active"
    ]


def scan_company(company: Dict, now: Optional[datetime.datetime] = None) -> int:
    """Notify for one company. Returns the number of notifications created."""
    now = now or datetime.datetime.now()
    company_id = company["id"]
    slug = company.get("slug")
    created = 0

    for schedule in get_store("maintenance_schedules").items_for_company(company_id):
        state = schedule_state(schedule, now)
        if state not in ("overdue", "due_soon"):
            continue
        name = asset_name(schedule.get("asset_id"))
        if state == "overdue":
            ntype, title = "maintenance_overdue", f"Maintenance overdue: {schedule.get('name')}"
        else:
            ntype, title = "maintenance_due", f"Maintenance due soon: {schedule.get('name')}"
        message = f"{name} - due {schedule.get('next_due_date')}"
        for user_id in schedule_recipients(schedule):
            if create_notification(company_id, user_id, ntype, title, message,
                                   link=f"/{slug}/dashboard/assets/{schedule.get('asset_id')}",
                                   dedupe_key=f"schedule:{schedule['id']}:{state}"):
                created += 1

    critical = [
        a for a in compute_asset_alerts(get_store("assets").items_for_company(company_id), now=now)
        if a["severity"] == "critical"
    ]
    admins = company_admins(company_id) if critical else []
    for alert in critical:
        for user_id in admins:
            if create_notification(company_id, user_id, "asset_alert", alert["title"],
                                   alert["description"],
                                   link=f"/{slug}/dashboard/assets/{alert['asset_id']}",
                                   dedupe_key=alert["id"]):
                created += 1

    if created:
        logger.info("Scan %s: %d notification(s)", slug, created)
    return created


def scan_all(now: Optional[datetime.datetime] = None) -> Dict[str, int]:
    results = {}
    for company in get_store("companies").items():
        if company.get("status") == "suspended":
            continue
        results[company.get("slug") or company["id"]] = scan_company(company, now)
    return results
