"""
Harmoniq Safety - Checklist submissions
"""
import logging
from typing import Dict, List, Optional

from ..db import _ts
from ..directory.names import user_name
from ..errors import NotFound, ValidationError
from ..stores import get_store
from .templates import get_template

logger = logging.getLogger("harmoniq.checklists")

SUBMISSION_STATUSES = ("draft", "submitted")
POSITIVE = ("pass", "yes")
NEGATIVE = ("fail", "no")


def _has_value(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def missing_required(template: Dict, responses: List[Dict]) -> List[str]:
    answered = {r.get("item_id"): r.get("value") for r in responses}
    return [
        item["id"] for item in template.get("items") or []
        if item.get("required") and not _has_value(answered.get(item["id"]))
    ]


def summarize(template: Dict, responses: List[Dict]) -> Dict:
    """Pass / fail / n/a counts and the average rating."""
    types = {item["id"]: item.get("type") for item in template.get("items") or []}
    passed = failed = na = 0
    ratings = []
    for response in responses:
        value = response.get("value")
        kind = types.get(response.get("item_id"))
        if kind == "rating":
            try:
                ratings.append(float(value))
            except (TypeError, ValueError):
                continue
        elif isinstance(value, str):
            lowered = value.lower()
            if lowered in POSITIVE:
                passed += 1
            elif lowered in NEGATIVE:
                failed += 1
            elif lowered == "na":
                na += 1
        elif isinstance(value, bool):
            if value:
                passed += 1
            else:
                failed += 1
    return {
        "passed": passed,
        "failed": failed,
        "na": na,
        "average_rating": round(sum(ratings) / len(ratings), 1) if ratings else None,
        "result": "fail" if failed else "pass",
    }


def _clean_responses(template: Dict, responses) -> List[Dict]:
    if responses is None:
        return []
    if not isinstance(responses, list):
        raise ValidationError("responses must be a list")
    known = {item["id"] for item in template.get("items") or []}
    cleaned = []
    for response in responses:
        item_id = (response or {}).get("item_id")
        if item_id not in known:
            raise ValidationError(f"Unknown checklist item: {item_id}")
        cleaned.append({
            "item_id": item_id,
            "value": response.get("value"),
            "comment": response.get("comment"),
            "photo_urls": list(response.get("photo_urls") or []),
        })
    return cleaned


def create_submission(company_id: str, submitter_id: str, data: Dict) -> Dict:
    template = get_template(company_id, data.get("template_id"))
    if not template.get("is_active", True):
        raise ValidationError("Checklist template is inactive")
    status = data.get("status", "submitted")
    if status not in SUBMISSION_STATUSES:
        raise ValidationError(f"Invalid status: {status}")
    responses = _clean_responses(template, data.get("responses"))
    if status == "submitted":
        missing = missing_required(template, responses)
        if missing:
            raise ValidationError(f"Required items not answered: {', '.join(missing)}")

    submission = get_store("checklist_submissions").add({
        "company_id": company_id,
        "template_id": template["id"],
        "submitter_id": submitter_id,
        "location_id": data.get("location_id"),
        "responses": responses,
        "general_comments": data.get("general_comments"),
        "status": status,
        "submitted_at": _ts() if status == "submitted" else None,
        "summary": summarize(template, responses),
    })
    logger.info("Checklist %s %s by %s", template["id"], status, submitter_id)
    return submission


def list_submissions(company_id: str, template_id: str = None, submitter_id: Optional[str] = None,
                     status: str = None) -> List[Dict]:
    submissions = get_store("checklist_submissions").items_for_company(company_id)
    if template_id:
        submissions = [s for s in submissions if s.get("template_id") == template_id]
    if submitter_id:
        submissions = [s for s in submissions if s.get("submitter_id") == submitter_id]
    if status:
        submissions = [s for s in submissions if s.get("status") == status]
    for submission in submissions:
        submission["submitter_name"] = user_name(submission.get("submitter_id"))
    return sorted(submissions, key=lambda s: s.get("created_at") or "", reverse=True)


def get_submission(company_id: str, submission_id: str) -> Dict:
    submission = get_store("checklist_submissions").get_by_id(submission_id)
    if not submission or submission.get("company_id") != company_id:
        raise NotFound("Checklist submission not found")
    return submission
