"""
Harmoniq Safety - Risk evaluation document assembly

Turns a stored risk evaluation (raw form answers) into the data each
document template prints, picks the template and names the file.
"""
import datetime
import logging
from typing import Dict, List, Optional, Tuple

from ...directory.names import location_name, user_name
from ..catalog import HAZARD_TYPES, PPE_LABELS, RIE_CATEGORIES, SAM_ITEM_LABELS
from ..scoring import (
    arbowet_summary, jha_score, jsa_summary, osa_summary, rie_priority,
    rie_score, sam_level, sam_score,
)
from .templates import TEMPLATES

logger = logging.getLogger("harmoniq.risk.pdf")

FILE_PREFIXES = {
    "jha": "jha",
    "jsa": "jsa",
    "rie": "rie",
    "arbowet": "arbowet-audit",
    "sam": "sam",
    "osa": "osa",
}

_HAZARD_LABELS = {h["id"]: h["label"] for h in HAZARD_TYPES}
_RIE_ITEMS = {
    item["id"]: (cat["pdf_name"], item["label"])
    for cat in RIE_CATEGORIES for item in cat["items"]
}


def _join(*parts) -> str:
    return "; ".join(p for p in parts if p)


def _date_part(value: Optional[str]) -> str:
    return (value or "")[:10]


def _crew(value) -> List[str]:
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def _present(risks) -> List[Dict]:
    return [r for r in risks or [] if r.get("present", True)]


# ---------------------------------------------------------------------------
# Per-form data
# ---------------------------------------------------------------------------

def _jha_hazards(responses: Dict) -> List[Dict]:
    hazards = []
    for step in responses.get("jobSteps") or responses.get("hazards") or []:
        hazard = step.get("hazard") or step.get("hazardDescription")
        if not hazard and step.get("hazards"):
            hazard = ", ".join(_HAZARD_LABELS.get(h, h) for h in step["hazards"])
        hazards.append({
            "step": step.get("step") or step.get("description") or "",
            "hazard": hazard or "",
            "severity": step.get("severity") or 0,
            "probability": step.get("probability") or 0,
            "risk_score": jha_score(step.get("severity"), step.get("probability")),
            "controls": step.get("controls")
            or _join(step.get("existingControls"), step.get("recommendedControls")),
        })
    return hazards


def _jha_data(responses: Dict, base: Dict, job_title: Optional[str] = None) -> Dict:
    hazards = _jha_hazards(responses)
    if job_title is None:
        job_title = responses.get("jobTitle") or (hazards[0]["step"] if hazards else "") or "Risk Assessment"
    return {
        **base,
        "job_title": job_title,
        "analysis_date": base["date"],
        "analyst_name": base["submitted_by"],
        "hazards": hazards,
        "ppe_required": [PPE_LABELS.get(p, p) for p in responses.get("ppeRequired") or []],
        "additional_notes": responses.get("additionalNotes") or responses.get("notes"),
    }


def _jsa_data(responses: Dict, base: Dict) -> Dict:
    summary = jsa_summary(responses.get("checklistItems"))
    return {
        **base,
        "time": responses.get("time") or "",
        "job_description": responses.get("jobDescription") or "",
        "crew_leader": responses.get("crewLeader") or base["submitted_by"],
        "crew_members": _crew(responses.get("crewMembers")),
        "categories": summary["categories"],
        "identified_hazards": responses.get("identifiedHazards") or "",
        "control_measures": responses.get("controlMeasures") or "",
        "stop_work_conditions": responses.get("stopWorkConditions")
        or responses.get("stopsWorkConditions") or "",
        "pass_count": summary["pass_count"],
        "fail_count": summary["fail_count"],
        "na_count": summary["na_count"],
    }


def _rie_data(responses: Dict, base: Dict) -> Dict:
    risks = []
    derived_plan = []
    for r in _present(responses.get("risks")):
        score = rie_score(r.get("severity"), r.get("probability"), r.get("exposure"))
        priority = r.get("priority") or rie_priority(score)
        category, label = _RIE_ITEMS.get(r.get("itemId"), (r.get("category") or "", ""))
        additional = r.get("additionalMeasures") or r.get("actionRequired") or ""
        risks.append({
            "category": f"{category} - {label}" if label else category,
            "description": r.get("description"),
            "severity": r.get("severity") or 0,
            "probability": r.get("probability") or 0,
            "exposure": r.get("exposure") or 0,
            "risk_score": score,
            "priority": priority,
            "current_measures": r.get("currentMeasures") or r.get("currentControls") or "",
            "additional_measures": additional,
            "responsible": r.get("responsible") or "",
            "deadline": r.get("deadline") or "",
        })
        if additional:
            derived_plan.append({"action": additional, "priority": priority,
                                 "responsible": r.get("responsible") or "",
                                 "deadline": r.get("deadline") or "", "status": "open"})
    return {
        **base,
        "assessment_date": base["date"],
        "assessor_name": base["submitted_by"],
        "risks": risks,
        "action_plan": responses.get("actionPlan") or derived_plan,
        "approved_by": base["reviewed_by"],
        "approval_date": base["reviewed_date"],
        "evaluation_date": responses.get("evaluationDate") or responses.get("nextEvaluationDate"),
    }


def _arbowet_data(responses: Dict, base: Dict) -> Dict:
    return {
        **base,
        "auditor": responses.get("auditor") or base["submitted_by"],
        "audit_date": responses.get("auditDate") or base["date"],
        **arbowet_summary(responses.get("items")),
        "overall_assessment": responses.get("overallAssessment") or "",
        "priority_actions": responses.get("priorityActions") or "",
        "next_audit_date": responses.get("nextAuditDate"),
    }


def _sam_data(responses: Dict, base: Dict, with_risks: bool = True) -> Dict:
    risks = []
    derived_actions = []
    if with_risks:
        for r in _present(responses.get("risks")):
            score = sam_score(r.get("severity"), r.get("probability"))
            risks.append({
                "description": r.get("description") or SAM_ITEM_LABELS.get(r.get("itemId"))
                or r.get("category") or "",
                "severity": r.get("severity") or 0,
                "probability": r.get("probability") or 0,
                "risk_score": score,
                "level": sam_level(score),
            })
            if r.get("additionalMeasures"):
                derived_actions.append({"action": r["additionalMeasures"],
                                        "responsible": r.get("responsible") or "",
                                        "deadline": r.get("deadline") or "",
                                        "follow_up": responses.get("followUpDate") or ""})
    actions = [
        {"action": a.get("action"), "responsible": a.get("responsible"),
         "deadline": a.get("deadline"), "follow_up": a.get("status")}
        for a in responses.get("actionPlan") or []
    ] if with_risks else []
    return {
        **base,
        "workplace": responses.get("workplace") or base["location"],
        "assessment_date": base["date"],
        "assessor_name": base["submitted_by"],
        "organizational_factors": responses.get("organizationalFactors") or [],
        "social_factors": responses.get("socialFactors") or [],
        "risks": risks,
        "actions": actions or derived_actions,
        "approved_by": base["reviewed_by"],
        "approval_date": base["reviewed_date"],
        "next_review_date": responses.get("followUpDate"),
    }


def _osa_data(responses: Dict, base: Dict) -> Dict:
    summary = osa_summary(responses.get("responses"))
    return {
        **base,
        "assessment_date": base["date"],
        "respondent": responses.get("respondent") or base["submitted_by"],
        "role": responses.get("role") or "",
        "sections": summary["sections"],
        "overall_average": summary["overall_average"],
        "concern_count": summary["concern_count"],
        "low_rating_count": summary["low_rating_count"],
        "overall_concerns": responses.get("overallConcerns") or "",
        "suggestions": responses.get("suggestions") or "",
    }


_DATA_BUILDERS = {
    "jha": _jha_data,
    "jsa": _jsa_data,
    "rie": _rie_data,
    "arbowet": _arbowet_data,
    "sam": _sam_data,
    "osa": _osa_data,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _base_data(evaluation: Dict, company: Dict) -> Dict:
    responses = evaluation.get("responses") or {}
    reviewer = evaluation.get("reviewed_by")
    return {
        "company_name": company.get("name") or "",
        "logo_url": company.get("logo_url"),
        "location": location_name(evaluation.get("location_id")) if evaluation.get("location_id")
        else responses.get("location") or "",
        "department": responses.get("department") or "General",
        "date": _date_part(evaluation.get("submitted_at") or evaluation.get("created_at")),
        "submitted_by": user_name(evaluation.get("submitter_id")),
        "reviewed_by": user_name(reviewer) if reviewer else None,
        "reviewed_date": _date_part(evaluation.get("reviewed_at")) or None,
    }


def build_document(evaluation: Dict, company: Dict) -> Tuple[str, Dict, str]:
    """Return (template key, template data, download filename).

    Unknown form types fall back on the company country: US gets a JHA,
    NL an RI&E and everyone else a SAM without risks or actions.
    """
    form_type = evaluation.get("form_type")
    responses = evaluation.get("responses") or {}
    base = _base_data(evaluation, company)

    if form_type in _DATA_BUILDERS:
        data = _DATA_BUILDERS[form_type](responses, base)
        filename = f"{FILE_PREFIXES[form_type]}-{evaluation['id']}-{base['date']}.pdf"
        return form_type, data, filename

    country = evaluation.get("country") or company.get("country")
    logger.warning("Unknown risk form type %r on %s, falling back for country %s",
                   form_type, evaluation.get("id"), country)
    filename = f"risk-assessment-{evaluation['id']}.pdf"
    if country == "US":
        return "jha", _jha_data(responses, base, job_title="Risk Assessment"), filename
    if country == "NL":
        return "rie", _rie_data(responses, base), filename
    return "sam", _sam_data(responses, base, with_risks=False), filename


def render_html(evaluation: Dict, company: Dict, generated: Optional[str] = None) -> Tuple[str, str]:
    """Return (html, pdf filename) for an evaluation."""
    template_key, data, filename = build_document(evaluation, company)
    generated = generated or datetime.date.today().isoformat()
    return TEMPLATES[template_key](data, generated), filename
