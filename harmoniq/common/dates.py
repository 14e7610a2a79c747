"""
Harmoniq Safety - Date range filtering
"""
import datetime
from typing import Optional, Tuple

from ..db import parse_dt

DATE_RANGES = {
    "today": "Today",
    "yesterday": "Yesterday",
    "last_7_days": "Last 7 days",
    "last_30_days": "Last 30 days",
    "last_90_days": "Last 90 days",
    "last_6_months": "Last 6 months",
    "all_time": "All time",
    "custom": "Custom range",
}

_EPOCH = datetime.datetime(1970, 1, 1)


def _end_of_day(d: datetime.datetime) -> datetime.datetime:
    return d.replace(hour=23, minute=59, second=59, microsecond=999000)


def _months_back(d: datetime.datetime, months: int) -> datetime.datetime:
    month_index = d.month - 1 - months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp the day for shorter months
    for day in (d.day, 30, 29, 28):
        try:
            return d.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    return d.replace(year=year, month=month, day=28)


def date_range_bounds(
    value: Optional[str],
    custom_start: Optional[str] = None,
    custom_end: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> Tuple[datetime.datetime, datetime.datetime]:
    """Resolve a named range to (start, end) datetimes.

    A custom end given as a plain date covers the whole day. A custom range
    missing either bound, or an unknown name, means all time.
    """
    now = now or datetime.datetime.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = _end_of_day(today)

    if value == "today":
        return today, end
    if value == "yesterday":
        yesterday = today - datetime.timedelta(days=1)
        return yesterday, _end_of_day(yesterday)
    if value == "last_7_days":
        return today - datetime.timedelta(days=7), end
    if value == "last_30_days":
        return today - datetime.timedelta(days=30), end
    if value == "last_90_days":
        return today - datetime.timedelta(days=90), end
    if value == "last_6_months":
        return _months_back(today, 6), end
    if value == "custom" and custom_start and custom_end:
        start_dt = parse_dt(custom_start)
        end_dt = parse_dt(custom_end)
        if start_dt is not None and end_dt is not None:
            if "T" not in custom_end and " " not in custom_end.strip():
                end_dt = _end_of_day(end_dt)
            return start_dt, end_dt
    return _EPOCH, end


def is_within_date_range(
    value,
    date_range: Optional[str],
    custom_start: Optional[str] = None,
    custom_end: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> bool:
    if not date_range or date_range == "all_time":
        return True
    target = parse_dt(value)
    if target is None:
        return False
    start, end = date_range_bounds(date_range, custom_start, custom_end, now=now)
    return start <= target <= end


def format_date_range(value: str, custom_start: Optional[str] = None, custom_end: Optional[str] = None) -> str:
    if value == "custom" and custom_start and custom_end:
        return f"{custom_start} - {custom_end}"
    return DATE_RANGES.get(value, DATE_RANGES["all_time"])
