"""
Harmoniq Safety - Risk evaluation records

A risk evaluation is one submitted regulatory form (JHA, JSA, RI&E, Arbowet,
SAM or OSA). The raw form answers live in `responses`; `summary` holds the
headline scores computed at save time.
"""
import datetime
import logging
from typing import Dict, List, Optional

from ..db import _ts
from ..directory.names import location_name, user_name
from ..errors import NotFound, ValidationError
from ..stores import get_store
from .catalog import EVALUATION_STATUSES, FORM_TYPES
from .scoring import summarize

logger = logging.getLogger("harmoniq.risk")

REVIEW_DECISIONS = ("approve", "request_revision")


def next_reference_number(company_id: str, form_type: str, year: int = None) -> str:
    """<FORM>-<year>-<nnn>, numbered per company, form and year."""
    code = FORM_TYPES[form_type][1]
    year = year or datetime.date.today().year
    prefix = f"{code}-{year}-"
    taken = {
        e.get("reference_number")
        for e in get_store("risk_evaluations").items_for_company(company_id)
        if (e.get("reference_number") or "").startswith(prefix)
    }
    n = len(taken) + 1
    while f"{prefix}{n:03d}" in taken:
        n += 1
    return f"{prefix}{n:03d}"


def _view(evaluation: Dict) -> Dict:
    evaluation["submitter_name"] = user_name(evaluation.get("submitter_id"))
    evaluation["location_name"] = location_name(evaluation.get("location_id"))
    if evaluation.get("reviewed_by"):
        evaluation["reviewer_name"] = user_name(evaluation["reviewed_by"])
    return evaluation


def list_evaluations(company_id: str, form_type: str = None, status: str = None,
                     submitter_id: Optional[str] = None, location_id: str = None) -> List[Dict]:
    evaluations = get_store("risk_evaluations").items_for_company(company_id)
    if form_type:
        evaluations = [e for e in evaluations if e.get("form_type") == form_type]
    if status:
        evaluations = [e for e in evaluations if e.get("status") == status]
    if submitter_id:
        evaluations = [e for e in evaluations if e.get("submitter_id") == submitter_id]
    if location_id:
        evaluations = [e for e in evaluations if e.get("location_id") == location_id]
    evaluations = [_view(e) for e in evaluations]
    return sorted(evaluations, key=lambda e: e.get("submitted_at") or e.get("created_at") or "",
                  reverse=True)


def get_evaluation(company_id: str, evaluation_id: str) -> Dict:
    evaluation = get_store("risk_evaluations").get_by_id(evaluation_id)
    if not evaluation or evaluation.get("company_id") != company_id:
        raise NotFound("Risk evaluation not found")
    return _view(evaluation)


def create_evaluation(company_id: str, submitter_id: str, data: Dict,
                      company_country: str = None) -> Dict:
    form_type = (data.get("form_type") or "").lower()
    if form_type not in FORM_TYPES:
        raise ValidationError(f"Invalid form type: {data.get('form_type')}")
    status = data.get("status", "submitted")
    if status not in ("draft", "submitted"):
        raise ValidationError(f"Invalid status: {status}")
    responses = data.get("responses") or {}
    if not isinstance(responses, dict):
        raise ValidationError("responses must be an object")

    now = _ts()
    evaluation = get_store("risk_evaluations").add({
        "company_id": company_id,
        "submitter_id": submitter_id,
        "country": data.get("country") or company_country or FORM_TYPES[form_type][0],
        "form_type": form_type,
        "location_id": data.get("location_id"),
        "reference_number": next_reference_number(company_id, form_type),
        "status": status,
        "responses": responses,
        "summary": summarize(form_type, responses),
        "reviewed_by": None,
        "reviewed_at": None,
        "review_notes": None,
        "submitted_at": now if status == "submitted" else None,
    })
    logger.info("Risk evaluation %s (%s) %s", evaluation["reference_number"], form_type, status)
    return _view(evaluation)


def update_evaluation(company_id: str, evaluation_id: str, data: Dict) -> Dict:
    """Edit a draft and optionally submit it."""
    evaluation = get_evaluation(company_id, evaluation_id)
    if evaluation.get("status") != "draft":
        raise ValidationError("Only draft evaluations can be edited")
    changes = {}
    if "responses" in data:
        if not isinstance(data["responses"], dict):
            raise ValidationError("responses must be an object")
        changes["responses"] = data["responses"]
        changes["summary"] = summarize(evaluation["form_type"], data["responses"])
    if "location_id" in data:
        changes["location_id"] = data["location_id"]
    if data.get("status") == "submitted":
        changes["status"] = "submitted"
        changes["submitted_at"] = _ts()
    elif data.get("status") not in (None, "draft"):
        raise ValidationError(f"Invalid status: {data['status']}")
    get_store("risk_evaluations").update(evaluation_id, changes)
    return get_evaluation(company_id, evaluation_id)


def review_evaluation(company_id: str, evaluation_id: str, reviewer_id: str,
                      decision: str = "approve", notes: str = None) -> Dict:
    """submitted -> reviewed on approval, submitted -> draft on a revision request."""
    if decision not in REVIEW_DECISIONS:
        raise ValidationError(f"Invalid review decision: {decision}")
    evaluation = get_evaluation(company_id, evaluation_id)
    if evaluation.get("status") != "submitted":
        raise ValidationError(f"Cannot review an evaluation in status '{evaluation.get('status')}'")

    if decision == "approve":
        changes = {"status": "reviewed", "reviewed_by": reviewer_id, "reviewed_at": _ts(),
                   "review_notes": notes}
    else:
        changes = {"status": "draft", "review_notes": notes}
    get_store("risk_evaluations").update(evaluation_id, changes)
    logger.info("Risk evaluation %s review: %s by %s", evaluation_id, decision, reviewer_id)
    return get_evaluation(company_id, evaluation_id)


def evaluation_counts(company_id: str) -> Dict[str, int]:
    counts = {status: 0 for status in EVALUATION_STATUSES}
    for e in get_store("risk_evaluations").items_for_company(company_id):
        if e.get("status") in counts:
            counts[e["status"]] += 1
    return counts
