"""
Harmoniq Safety - Incident dashboard stats and analytics
"""
import calendar
import datetime
from typing import Dict, List, Optional

from ..common.dates import date_range_bounds, is_within_date_range
from ..common.numbers import round_half_up
from ..db import parse_dt
from .models import OPEN_STATUSES, type_label


def _resolution_hours(incident: Dict) -> Optional[float]:
    resolved = parse_dt(incident.get("resolved_at"))
    created = parse_dt(incident.get("created_at"))
    if resolved is None or created is None:
        return None
    return max(0.0, (resolved - created).total_seconds() / 3600)


def dashboard_stats(incidents: List[Dict], now: Optional[datetime.datetime] = None) -> Dict:
    """Headline KPIs for the management dashboard."""
    now = now or datetime.datetime.now()
    today = now.date().isoformat()
    total = len(incidents)
    open_incidents = [i for i in incidents if i.get("status") in OPEN_STATUSES]
    resolved_today = [
        i for i in incidents
        if i.get("status") in ("resolved", "archived")
        and ((i.get("updated_at") or "")[:10] == today or (i.get("resolved_at") or "")[:10] == today)
    ]
    hours = [h for h in (_resolution_hours(i) for i in incidents) if h is not None]

    return {
        "total_incidents": total,
        "open_incidents": len(open_incidents),
        "resolved_today": len(resolved_today),
        "avg_resolution_time_hours": round_half_up(sum(hours) / len(hours)) if hours else 0,
        "ltir": round_half_up(len(open_incidents) / max(total, 1) * 100) / 10 if total else 0,
        "compliance_rate": (round_half_up((total - len(open_incidents)) / max(total, 1) * 1000) / 10
                            if total else 100),
    }


def _month_label(year: int, month: int, include_year: bool) -> str:
    label = calendar.month_abbr[month]
    return f"{label} '{str(year)[2:]}" if include_year else label


def _month_keys(start: datetime.date, end: datetime.date) -> List[tuple]:
    keys = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        keys.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return keys


def analytics(
    incidents: List[Dict],
    location_count: int,
    date_range: str = "last_6_months",
    custom_start: str = None,
    custom_end: str = None,
    location_id: str = None,
    incident_type: str = None,
    severity: str = None,
    now: Optional[datetime.datetime] = None,
) -> Dict:
    """Filtered KPIs, breakdowns and a month-by-month series."""
    now = now or datetime.datetime.now()
    filtered = [
        i for i in incidents
        if (not location_id or i.get("location_id") == location_id)
        and (not incident_type or i.get("type") == incident_type)
        and (not severity or i.get("severity") == severity)
        and is_within_date_range(i.get("incident_date"), date_range, custom_start, custom_end, now=now)
    ]
    total = len(filtered)
    lost_time = sum(1 for i in filtered if i.get("lost_time"))
    resolved = [i for i in filtered if i.get("status") == "resolved" and i.get("resolved_at")]
    hours = [h for h in (_resolution_hours(i) for i in resolved) if h is not None]

    by_type: Dict[str, int] = {}
    by_severity: Dict[str, int] = {}
    by_status: Dict[str, int] = {}
    for inc in filtered:
        label = type_label(inc.get("type"))
        by_type[label] = by_type.get(label, 0) + 1
        by_severity[inc.get("severity")] = by_severity.get(inc.get("severity"), 0) + 1
        by_status[inc.get("status")] = by_status.get(inc.get("status"), 0) + 1

    # Month axis; all_time starts at the earliest incident, or a year back when empty
    start, end = date_range_bounds(date_range, custom_start, custom_end, now=now)
    if not date_range or date_range == "all_time":
        dates = [d for d in (parse_dt(i.get("incident_date")) for i in filtered) if d is not None]
        if dates:
            start = min(dates)
        else:
            start = now - datetime.timedelta(days=365)
    keys = _month_keys(start.date(), end.date())
    include_year = len(keys) > 12 or (bool(keys) and keys[0][0] != keys[-1][0])

    buckets = {key: {"incidents": 0, "resolved": 0, "hours": 0.0, "count": 0} for key in keys}
    for inc in filtered:
        d = parse_dt(inc.get("incident_date"))
        if d is None or (d.year, d.month) not in buckets:
            continue
        bucket = buckets[(d.year, d.month)]
        bucket["incidents"] += 1
        if inc.get("status") == "resolved" and inc.get("resolved_at"):
            bucket["resolved"] += 1
            h = _resolution_hours(inc)
            if h is not None:
                bucket["hours"] += h
                bucket["count"] += 1

    months = []
    for (year, month) in keys:
        b = buckets[(year, month)]
        months.append({
            "month": _month_label(year, month, include_year),
            "month_key": f"{year}-{month:02d}",
            "incidents": b["incidents"],
            "resolved": b["resolved"],
            "avg_resolution_hours": round_half_up(b["hours"] / b["count"]) if b["count"] else 0,
            "compliance_rate": round_half_up(b["resolved"] / b["incidents"] * 100) if b["incidents"] else 0,
        })

    return {
        "total_incidents": total,
        "lost_time_incidents": lost_time,
        "avg_resolution_hours": round_half_up(sum(hours) / len(hours)) if hours else 0,
        "ltir": round_half_up(lost_time / total * 100, 1) if total else 0.0,
        "trir": round_half_up(total / max(location_count, 1), 1) if total else 0.0,
        "compliance_rate": round_half_up(len(resolved) / total * 100) if total else 0,
        "by_type": by_type,
        "by_severity": by_severity,
        "by_status": by_status,
        "months": months,
    }
