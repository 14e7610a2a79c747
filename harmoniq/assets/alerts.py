"""
Harmoniq Safety - Computed asset alerts

Warranty, calibration and maintenance dates that have passed or fall inside
the look-ahead window. Nothing is stored; alerts are derived on read.
"""
import datetime
from typing import Dict, List, Optional

from .. import config
from ..db import parse_dt

SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}

# field, kind, type when passed, type when upcoming, title when passed, title when upcoming
_CHECKS = (
    ("warranty_expiry", "warranty", "warranty_expired", "warranty_expiring",
     "Warranty expired", "Warranty expiring"),
    ("next_calibration_date", "calibration", "calibration_overdue", "calibration_due",
     "Calibration overdue", "Calibration due"),
    ("next_maintenance_date", "maintenance", "maintenance_overdue", "maintenance_due",
     "Maintenance overdue", "Maintenance due"),
)


def alert_severity(days_until: float) -> str:
    if days_until < 0:
        return "critical"
    if days_until <= 30:
        return "warning"
    return "info"


def _describe(days_until: float) -> str:
    days = int(abs(days_until))
    if days_until < 0:
        return f"{days} day{'s' if days != 1 else ''} ago"
    return f"in {days} day{'s' if days != 1 else ''}"


def compute_asset_alerts(
    assets: List[Dict],
    now: Optional[datetime.datetime] = None,
    window_days: Optional[int] = None,
) -> List[Dict]:
    now = now or datetime.datetime.now()
    window = config.ALERT_WINDOW_DAYS if window_days is None else window_days
    alerts = []

    for asset in assets:
        if asset.get("status") == "retired":
            continue
        for field, kind, passed_type, upcoming_type, passed_title, upcoming_title in _CHECKS:
            if kind == "calibration" and not asset.get("requires_calibration"):
                continue
            due = parse_dt(asset.get(field))
            if due is None:
                continue
            days_until = (due - now).total_seconds() / 86400
            if days_until > window:
                continue
            passed = days_until < 0
            alerts.append({
                "id": f"alert_{kind}_{asset['id']}",
                "company_id": asset.get("company_id"),
                "type": passed_type if passed else upcoming_type,
                "asset_id": asset["id"],
                "asset_name": asset.get("name"),
                "title": f"{asset.get('name')}: {passed_title if passed else upcoming_title}",
                "description": f"{field.replace('_', ' ').capitalize()} {_describe(days_until)}",
                "due_date": asset.get(field),
                "days_until": int(days_until // 1),
                "severity": alert_severity(days_until),
            })

    alerts.sort(key=lambda a: (SEVERITY_ORDER[a["severity"]], str(a["due_date"])))
    return alerts
