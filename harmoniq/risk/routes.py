"""
Harmoniq Safety - Risk Evaluation API Routes
"""
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response

from ..audit import client_meta, log_action
from ..auth import require_user
from ..auth.permissions import DASHBOARD_ROLES, has_permission
from ..errors import PermissionDenied
from .catalog import form_catalog
from .models import (
    create_evaluation, evaluation_counts, get_evaluation, list_evaluations,
    review_evaluation, update_evaluation,
)
from .pdf import render_html, render_pdf

PREFIX = "/api/companies/{slug}"


def _visible_evaluation(user, company, evaluation_id):
    evaluation = get_evaluation(company["id"], evaluation_id)
    if evaluation.get("submitter_id") != user["id"] and not has_permission(user, "reports.view_team"):
        raise PermissionDenied("Not allowed to view this evaluation")
    return evaluation


def register_risk_routes(app: FastAPI):
    """Register risk evaluation, review and document endpoints."""

    @app.get(PREFIX + "/risk-forms")
    async def api_risk_forms(slug: str, request: Request):
        _, company = require_user(request, slug)
        country = request.query_params.get("country") or company.get("country")
        return {"ok": True, "country": country, **form_catalog(country)}

    @app.get(PREFIX + "/risk-evaluations")
    async def api_list_evaluations(slug: str, request: Request):
        user, company = require_user(request, slug)
        q = request.query_params
        submitter = None if has_permission(user, "reports.view_team") else user["id"]
        evaluations = list_evaluations(company["id"], form_type=q.get("form_type"),
                                       status=q.get("status"), submitter_id=submitter,
                                       location_id=q.get("location_id"))
        return {"ok": True, "evaluations": evaluations, "counts": evaluation_counts(company["id"])}

    @app.post(PREFIX + "/risk-evaluations")
    async def api_create_evaluation(slug: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.complete")
        data = await request.json()
        evaluation = create_evaluation(company["id"], user["id"], data,
                                       company_country=company.get("country"))
        log_action(company["id"], user["id"], "create", "risk_evaluation", evaluation["id"],
                   new_values={"form_type": evaluation["form_type"],
                               "reference_number": evaluation["reference_number"],
                               "status": evaluation["status"]},
                   **client_meta(request))
        return {"ok": True, "evaluation": evaluation}

    @app.get(PREFIX + "/risk-evaluations/{evaluation_id}")
    async def api_get_evaluation(slug: str, evaluation_id: str, request: Request):
        user, company = require_user(request, slug)
        return {"ok": True, "evaluation": _visible_evaluation(user, company, evaluation_id)}

    @app.put(PREFIX + "/risk-evaluations/{evaluation_id}")
    async def api_update_evaluation(slug: str, evaluation_id: str, request: Request):
        user, company = require_user(request, slug)
        existing = get_evaluation(company["id"], evaluation_id)
        if existing.get("submitter_id") != user["id"]:
            raise PermissionDenied("Only the submitter can edit this evaluation")
        data = await request.json()
        evaluation = update_evaluation(company["id"], evaluation_id, data)
        log_action(company["id"], user["id"], "update", "risk_evaluation", evaluation_id,
                   old_values={"status": existing["status"]}, new_values={"status": evaluation["status"]},
                   **client_meta(request))
        return {"ok": True, "evaluation": evaluation}

    @app.post(PREFIX + "/risk-evaluations/{evaluation_id}/review")
    async def api_review_evaluation(slug: str, evaluation_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        evaluation = review_evaluation(company["id"], evaluation_id, user["id"],
                                       decision=data.get("decision", "approve"), notes=data.get("notes"))
        log_action(company["id"], user["id"], "review", "risk_evaluation", evaluation_id,
                   new_values={"decision": data.get("decision", "approve"), "status": evaluation["status"]},
                   **client_meta(request))
        return {"ok": True, "evaluation": evaluation}

    @app.get(PREFIX + "/risk-evaluations/{evaluation_id}/html", response_class=HTMLResponse)
    async def api_evaluation_html(slug: str, evaluation_id: str, request: Request):
        user, company = require_user(request, slug)
        evaluation = _visible_evaluation(user, company, evaluation_id)
        html, _ = render_html(evaluation, company)
        return HTMLResponse(html)

    @app.get(PREFIX + "/risk-evaluations/{evaluation_id}/pdf")
    async def api_evaluation_pdf(slug: str, evaluation_id: str, request: Request):
        user, company = require_user(request, slug)
        evaluation = _visible_evaluation(user, company, evaluation_id)
        pdf, filename = render_pdf(evaluation, company)
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
