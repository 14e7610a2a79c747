"""
Harmoniq Safety - Checklist API Routes
"""
from fastapi import FastAPI, Request

from ..audit import client_meta, log_action
from ..auth import require_user
from ..auth.permissions import has_permission
from ..errors import NotFound
from .submissions import create_submission, get_submission, list_submissions
from .templates import (
    create_template, delete_template, get_template, inspection_template_for,
    list_templates, update_template,
)

PREFIX = "/api/companies/{slug}"


def register_checklist_routes(app: FastAPI):
    """Register checklist template, submission and inspection template endpoints."""

    @app.get(PREFIX + "/checklists/templates")
    async def api_list_templates(slug: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.view")
        active_only = not has_permission(user, "checklists.create_templates")
        return {"ok": True, "templates": list_templates(company["id"], active_only=active_only)}

    @app.post(PREFIX + "/checklists/templates")
    async def api_create_template(slug: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.create_templates")
        data = await request.json()
        template = create_template(company["id"], data)
        log_action(company["id"], user["id"], "create", "checklist_template", template["id"],
                   new_values={"name": template["name"]}, **client_meta(request))
        return {"ok": True, "template": template}

    @app.get(PREFIX + "/checklists/templates/{template_id}")
    async def api_get_template(slug: str, template_id: str, request: Request):
        _, company = require_user(request, slug, permission="checklists.view")
        return {"ok": True, "template": get_template(company["id"], template_id)}

    @app.put(PREFIX + "/checklists/templates/{template_id}")
    async def api_update_template(slug: str, template_id: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.create_templates")
        data = await request.json()
        template = update_template(company["id"], template_id, data)
        log_action(company["id"], user["id"], "update", "checklist_template", template_id,
                   new_values=data, **client_meta(request))
        return {"ok": True, "template": template}

    @app.delete(PREFIX + "/checklists/templates/{template_id}")
    async def api_delete_template(slug: str, template_id: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.create_templates")
        result = delete_template(company["id"], template_id)
        log_action(company["id"], user["id"], "delete", "checklist_template", template_id,
                   new_values=result, **client_meta(request))
        return {"ok": True, **result}

    @app.get(PREFIX + "/checklists/submissions")
    async def api_list_submissions(slug: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.view")
        q = request.query_params
        # Without reporting rights a user sees only their own submissions
        submitter = None if has_permission(user, "reports.view_team") else user["id"]
        submissions = list_submissions(company["id"], template_id=q.get("template_id"),
                                       submitter_id=submitter, status=q.get("status"))
        return {"ok": True, "submissions": submissions}

    @app.post(PREFIX + "/checklists/submissions")
    async def api_create_submission(slug: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.complete")
        data = await request.json()
        submission = create_submission(company["id"], user["id"], data)
        log_action(company["id"], user["id"], "submit", "checklist_submission", submission["id"],
                   new_values={"template_id": submission["template_id"], "status": submission["status"]},
                   **client_meta(request))
        return {"ok": True, "submission": submission}

    @app.get(PREFIX + "/checklists/submissions/{submission_id}")
    async def api_get_submission(slug: str, submission_id: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.view")
        submission = get_submission(company["id"], submission_id)
        if submission.get("submitter_id") != user["id"] and not has_permission(user, "reports.view_team"):
            raise NotFound("Checklist submission not found")
        return {"ok": True, "submission": submission}

    @app.get(PREFIX + "/inspection-templates/{category}")
    async def api_inspection_template(slug: str, category: str, request: Request):
        require_user(request, slug)
        return {"ok": True, "template": inspection_template_for(category)}
