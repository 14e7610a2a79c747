"""
Harmoniq Safety - Maintenance schedule date rules

Pure helpers shared by the maintenance module, the asset health score and the
notification scan.
"""
import calendar
import datetime
from typing import Dict, List, Optional

from ..common.numbers import round_half_up
from ..db import parse_dt

FREQUENCY_UNITS = ("days", "weeks", "months", "years")


def _as_date(value) -> Optional[datetime.date]:
    dt = parse_dt(value)
    return dt.date() if dt else None


def _today(now: Optional[datetime.datetime] = None) -> datetime.date:
    return (now or datetime.datetime.now()).date()


def add_months(d: datetime.date, months: int) -> datetime.date:
    """Shift by calendar months, clamping the day to the target month's end."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return datetime.date(year, month, day)


def next_due_from(start: datetime.date, frequency_value: int, frequency_unit: str) -> datetime.date:
    value = int(frequency_value or 0)
    if frequency_unit == "days":
        return start + datetime.timedelta(days=value)
    if frequency_unit == "weeks":
        return start + datetime.timedelta(days=value * 7)
    if frequency_unit == "months":
        return add_months(start, value)
    if frequency_unit == "years":
        return add_months(start, value * 12)
    raise ValueError(f"Unknown frequency unit: {frequency_unit}")


def is_overdue(schedule: Dict, now: Optional[datetime.datetime] = None) -> bool:
    """Past its due date. The due day itself is still on time."""
    due = _as_date(schedule.get("next_due_date"))
    return due is not None and due < _today(now)


def is_due_soon(schedule: Dict, now: Optional[datetime.datetime] = None) -> bool:
    due = _as_date(schedule.get("next_due_date"))
    if due is None:
        return False
    today = _today(now)
    window = today + datetime.timedelta(days=int(schedule.get("notify_days_before") or 0))
    return today <= due <= window


def days_until_due(schedule: Dict, now: Optional[datetime.datetime] = None) -> Optional[int]:
    due = _as_date(schedule.get("next_due_date"))
    if due is None:
        return None
    return (due - _today(now)).days


def schedule_state(schedule: Dict, now: Optional[datetime.datetime] = None) -> str:
    if not schedule.get("is_active", True):
        return "inactive"
    if is_overdue(schedule, now):
        return "overdue"
    if is_due_soon(schedule, now):
        return "due_soon"
    return "scheduled"


def maintenance_compliance(schedules: List[Dict], now: Optional[datetime.datetime] = None) -> int:
    """Share of schedules that are inactive or not overdue, as a whole percent."""
    if not schedules:
        return 100
    ok = sum(1 for s in schedules if not s.get("is_active", True) or not is_overdue(s, now))
    return round_half_up(ok / len(schedules) * 100)
