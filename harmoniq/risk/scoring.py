"""
Harmoniq Safety - Risk scoring heuristics

One scale per form family. All functions are pure and tolerate missing or
non-numeric inputs (treated as 0).
"""
from typing import Dict, List, Optional

from ..common.numbers import round_half_up
from .catalog import ARBOWET_ARTICLES, JSA_CHECKLIST_CATEGORIES, OSA_SECTIONS

RISK_COLORS = {"low": "#dcfce7", "medium": "#fef9c3", "high": "#fee2e2"}

GREEN = "#16a34a"
YELLOW = "#ca8a04"
RED = "#dc2626"


def _num(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0


def _int(value) -> int:
    return int(_num(value))


# ---------------------------------------------------------------------------
# Shared PDF scale
# ---------------------------------------------------------------------------

def risk_level(score) -> str:
    score = _num(score)
    if score <= 5:
        return "low"
    if score <= 11:
        return "medium"
    return "high"


def risk_color(level: Optional[str]) -> str:
    return RISK_COLORS.get(level or "", RISK_COLORS["low"])


# ---------------------------------------------------------------------------
# JHA
# ---------------------------------------------------------------------------

def jha_score(severity, probability) -> int:
    return _int(severity) * _int(probability)


def jha_level(score) -> str:
    score = _num(score)
    if score == 0:
        return "Not assessed"
    if score <= 5:
        return "Low"
    if score <= 11:
        return "Medium"
    return "High"


def jha_summary(steps: List[Dict]) -> Dict:
    scores = [jha_score(s.get("severity"), s.get("probability")) for s in steps or []]
    overall = max(scores) if scores else 0
    return {"step_count": len(scores), "overall_score": overall, "overall_level": jha_level(overall)}


# ---------------------------------------------------------------------------
# RI&E
# ---------------------------------------------------------------------------

def rie_score(severity, probability, exposure) -> int:
    return _int(severity) * _int(probability) * _int(exposure)


def rie_priority(score) -> str:
    score = _num(score)
    if score <= 3:
        return "low"
    if score <= 9:
        return "medium"
    return "high"


def rie_summary(risks: List[Dict]) -> Dict:
    present = [r for r in risks or [] if r.get("present", True)]
    counts = {"low": 0, "medium": 0, "high": 0}
    for r in present:
        counts[rie_priority(rie_score(r.get("severity"), r.get("probability"), r.get("exposure")))] += 1
    return {"risk_count": len(present), "by_priority": counts}


# ---------------------------------------------------------------------------
# SAM
# ---------------------------------------------------------------------------

SAM_LEVELS = {
    "low": "Låg",
    "medium": "Medel",
    "high": "Hög",
    "very_high": "Mycket hög",
}


def sam_score(severity, probability) -> int:
    return _int(severity) * _int(probability)


def sam_level(score) -> str:
    score = _num(score)
    if score <= 4:
        return "low"
    if score <= 8:
        return "medium"
    if score <= 12:
        return "high"
    return "very_high"


def sam_summary(risks: List[Dict]) -> Dict:
    present = [r for r in risks or [] if r.get("present", True)]
    counts = {key: 0 for key in SAM_LEVELS}
    for r in present:
        counts[sam_level(sam_score(r.get("severity"), r.get("probability")))] += 1
    return {"risk_count": len(present), "by_level": counts}


# ---------------------------------------------------------------------------
# OSA
# ---------------------------------------------------------------------------

def osa_score_color(score) -> str:
    score = _num(score)
    if score >= 4:
        return GREEN
    if score >= 3:
        return YELLOW
    return RED


def osa_section_average(ratings: List) -> float:
    """Mean of the non-zero ratings; 0 when nothing was rated."""
    rated = [_num(r) for r in ratings if _num(r) > 0]
    if not rated:
        return 0
    return sum(rated) / len(rated)


def osa_summary(responses: Dict[str, Dict]) -> Dict:
    responses = responses or {}
    sections = []
    for section in OSA_SECTIONS:
        questions = []
        for q in section["questions"]:
            answer = responses.get(q["id"]) or {}
            questions.append({
                "id": q["id"],
                "label": q["label"],
                "rating": _int(answer.get("rating")),
                "concern": bool(answer.get("concern")),
                "notes": answer.get("notes") or "",
            })
        sections.append({
            "id": section["id"],
            "title": section["title"],
            "questions": questions,
            "average": osa_section_average([q["rating"] for q in questions]),
        })
    overall = sum(s["average"] for s in sections) / len(sections) if sections else 0
    answers = [a or {} for a in responses.values()]
    return {
        "sections": sections,
        "overall_average": overall,
        "concern_count": sum(1 for a in answers if a.get("concern")),
        "low_rating_count": sum(1 for a in answers if 0 < _num(a.get("rating")) <= 2),
    }


# ---------------------------------------------------------------------------
# Arbowet
# ---------------------------------------------------------------------------

def compliance_color(score) -> str:
    score = _num(score)
    if score >= 80:
        return GREEN
    if score >= 50:
        return YELLOW
    return RED


def arbowet_summary(items: Dict[str, Dict]) -> Dict:
    """Counts, overall compliance score and per-article ratios.

    Partial compliance counts half. Items marked N/A or left unanswered are
    not applicable.
    """
    items = items or {}
    counts = {"compliant": 0, "partial": 0, "non_compliant": 0, "na": 0}
    for answer in items.values():
        status = (answer or {}).get("status")
        if status in counts:
            counts[status] += 1
    applicable = counts["compliant"] + counts["partial"] + counts["non_compliant"]
    score = 0
    if applicable:
        score = round_half_up((counts["compliant"] + counts["partial"] * 0.5) / applicable * 100)

    articles = []
    for article in ARBOWET_ARTICLES:
        rows = []
        for item in article["items"]:
            answer = items.get(item["id"]) or {}
            rows.append({
                "id": item["id"],
                "label": item["label"],
                "status": answer.get("status"),
                "evidence": answer.get("evidence") or "",
                "actionNeeded": answer.get("actionNeeded") or "",
            })
        articles.append({
            "id": article["id"],
            "title": article["title"],
            "description": article["description"],
            "items": rows,
            "compliant": sum(1 for r in rows if r["status"] == "compliant"),
            "applicable": sum(1 for r in rows if r["status"] not in (None, "na")),
        })
    return {
        "compliant_count": counts["compliant"],
        "partial_count": counts["partial"],
        "non_compliant_count": counts["non_compliant"],
        "na_count": counts["na"],
        "applicable": applicable,
        "compliance_score": score,
        "articles": articles,
    }


# ---------------------------------------------------------------------------
# JSA
# ---------------------------------------------------------------------------

def jsa_summary(checklist_items: Dict[str, Dict]) -> Dict:
    checklist_items = checklist_items or {}
    categories = []
    counts = {"pass": 0, "fail": 0, "na": 0}
    for category in JSA_CHECKLIST_CATEGORIES:
        rows = []
        for item in category["items"]:
            answer = checklist_items.get(item["id"]) or {}
            status = answer.get("status")
            if status in counts:
                counts[status] += 1
            rows.append({"id": item["id"], "label": item["label"], "status": status,
                         "notes": answer.get("notes") or ""})
        categories.append({"id": category["id"], "title": category["title"], "items": rows})
    return {
        "pass_count": counts["pass"],
        "fail_count": counts["fail"],
        "na_count": counts["na"],
        "categories": categories,
    }


def summarize(form_type: str, responses: Dict) -> Dict:
    """Headline numbers stored alongside a submitted evaluation."""
    responses = responses or {}
    if form_type == "jha":
        return jha_summary(responses.get("jobSteps") or responses.get("hazards"))
    if form_type == "jsa":
        s = jsa_summary(responses.get("checklistItems"))
        return {k: s[k] for k in ("pass_count", "fail_count", "na_count")}
    if form_type == "rie":
        return rie_summary(responses.get("risks"))
    if form_type == "arbowet":
        s = arbowet_summary(responses.get("items"))
        return {k: v for k, v in s.items() if k != "articles"}
    if form_type == "sam":
        return sam_summary(responses.get("risks"))
    if form_type == "osa":
        s = osa_summary(responses.get("responses"))
        return {
            "overall_average": round(s["overall_average"], 2),
            "concern_count": s["concern_count"],
            "low_rating_count": s["low_rating_count"],
        }
    return {}
