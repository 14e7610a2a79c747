"""
Harmoniq Safety - Asset health score

Fixed-weight penalties over inspection pass rate, overdue maintenance,
condition, downtime and age. Missing inputs cost nothing.
"""
import datetime
from typing import Dict, List, Optional

from ..common.numbers import round_half_up
from ..db import parse_dt
from ..maintenance.schedule import is_overdue

CONDITION_PENALTY = {
    "excellent": 0,
    "good": 5,
    "fair": 15,
    "poor": 30,
    "critical": 50,
}

DEFAULT_EXPECTED_LIFE_YEARS = 10


def inspection_pass_rate(inspections: List[Dict]) -> int:
    if not inspections:
        return 0
    passed = sum(1 for i in inspections if i.get("result") == "pass")
    return round_half_up(passed / len(inspections) * 100)


def total_downtime_hours(downtime_logs: List[Dict]) -> float:
    return sum(float(d["duration_hours"]) for d in downtime_logs if d.get("duration_hours") is not None)


def downtime_penalty(hours: float) -> int:
    if hours > 100:
        return 15
    if hours > 40:
        return 10
    if hours > 10:
        return 5
    return 0


def asset_age_years(asset: Dict, now: Optional[datetime.datetime] = None) -> Optional[float]:
    purchased = parse_dt(asset.get("purchase_date"))
    if purchased is None:
        return None
    now = now or datetime.datetime.now()
    return (now - purchased).total_seconds() / (365.25 * 86400)


def age_penalty(age_years: Optional[float], expected_life_years) -> int:
    if age_years is None:
        return 0
    life = expected_life_years or DEFAULT_EXPECTED_LIFE_YEARS
    if age_years > life:
        return 20
    if age_years > life * 0.8:
        return 10
    return 0


def health_label(score: int) -> str:
    if score >= 80:
        return "Good condition — continue regular maintenance"
    if score >= 50:
        return "Fair condition — attention needed"
    return "Poor condition — immediate action required"


def compute_health(
    asset: Dict,
    inspections: List[Dict],
    schedules: List[Dict],
    downtime_logs: List[Dict],
    now: Optional[datetime.datetime] = None,
) -> Dict:
    """Score an asset 0..100 and return the score with its breakdown."""
    now = now or datetime.datetime.now()
    score = 100.0
    penalties = {}

    pass_rate = inspection_pass_rate(inspections)
    if inspections:
        penalties["inspections"] = (1 - pass_rate / 100) * 30
        score -= penalties["inspections"]

    active = [s for s in schedules if s.get("is_active", True)]
    overdue = [s for s in active if is_overdue(s, now)]
    if active:
        penalties["maintenance"] = len(overdue) / len(active) * 25
        score -= penalties["maintenance"]

    penalties["condition"] = CONDITION_PENALTY.get(asset.get("condition"), 0)
    score -= penalties["condition"]

    downtime = total_downtime_hours(downtime_logs)
    penalties["downtime"] = downtime_penalty(downtime)
    score -= penalties["downtime"]

    age = asset_age_years(asset, now)
    penalties["age"] = age_penalty(age, asset.get("expected_life_years"))
    score -= penalties["age"]

    final = max(0, min(100, round_half_up(score)))
    return {
        "score": final,
        "label": health_label(final),
        "pass_rate": pass_rate,
        "total_inspections": len(inspections),
        "active_schedules": len(active),
        "overdue_schedules": len(overdue),
        "downtime_hours": round(downtime, 2),
        "age_years": round(age, 1) if age is not None else None,
        "penalties": {k: round(v, 2) for k, v in penalties.items()},
    }
