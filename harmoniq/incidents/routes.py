"""
Harmoniq Safety - Incident API Routes
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from ..audit import client_meta, log_action
from ..auth import require_user
from ..auth.permissions import DASHBOARD_ROLES, has_role
from ..common.csvutil import rows_to_csv
from ..common.pagination import paginate
from ..directory.names import UNASSIGNED, location_name
from ..errors import PermissionDenied
from ..stores import get_store
from . import workflow
from .models import (
    create_incident, create_ticket, delete_incident, get_incident, get_ticket,
    list_incidents, list_tickets, update_incident, update_ticket, visible_incidents,
)
from .stats import analytics, dashboard_stats

logger = logging.getLogger("harmoniq.incidents.routes")

PREFIX = "/api/companies/{slug}"


def _analytics_params(request: Request) -> dict:
    q = request.query_params
    return {
        "date_range": q.get("range", "last_6_months"),
        "custom_start": q.get("start"),
        "custom_end": q.get("end"),
        "location_id": q.get("location_id"),
        "incident_type": q.get("type"),
        "severity": q.get("severity"),
    }


def register_incident_routes(app: FastAPI):
    """Register incident, workflow, analytics and ticket endpoints."""

    # ============================================================
    # INCIDENTS
    # ============================================================

    @app.get(PREFIX + "/incidents")
    async def api_list_incidents(slug: str, request: Request):
        user, company = require_user(request, slug)
        q = request.query_params
        incidents = list_incidents(
            user, company["id"],
            status=q.get("status"), severity=q.get("severity"), incident_type=q.get("type"),
            location_id=q.get("location_id"), search=q.get("search"),
            date_range=q.get("range"), custom_start=q.get("start"), custom_end=q.get("end"),
        )
        page = paginate(incidents, q.get("page", 1), q.get("per_page", 25))
        return {"ok": True, "incidents": page.pop("items"), **page}

    @app.get(PREFIX + "/incidents/stats")
    async def api_incident_stats(slug: str, request: Request):
        user, company = require_user(request, slug)
        return {"ok": True, "stats": dashboard_stats(visible_incidents(user, company["id"]))}

    @app.post(PREFIX + "/incidents")
    async def api_create_incident(slug: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.create")
        data = await request.json()
        incident = create_incident(company["id"], user, data)
        log_action(company["id"], user["id"], "create", "incident", incident["id"],
                   new_values={"reference_number": incident["reference_number"], "type": incident["type"]},
                   **client_meta(request))
        return {"ok": True, "incident": incident}

    @app.get(PREFIX + "/incidents/{incident_id}")
    async def api_get_incident(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug)
        incident = get_incident(company["id"], incident_id, user)
        tickets = list_tickets(company["id"], incident_id=incident_id)
        return {"ok": True, "incident": incident, "tickets": tickets,
                "can_close": workflow.can_close(incident)}

    @app.put(PREFIX + "/incidents/{incident_id}")
    async def api_update_incident(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug)
        data = await request.json()
        incident = update_incident(company["id"], incident_id, user, data)
        log_action(company["id"], user["id"], "update", "incident", incident_id,
                   new_values=data, **client_meta(request))
        return {"ok": True, "incident": incident}

    @app.delete(PREFIX + "/incidents/{incident_id}")
    async def api_delete_incident(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.delete")
        delete_incident(company["id"], incident_id)
        log_action(company["id"], user["id"], "delete", "incident", incident_id, **client_meta(request))
        return {"ok": True}

    # ============================================================
    # WORKFLOW
    # ============================================================

    @app.post(PREFIX + "/incidents/{incident_id}/status")
    async def api_incident_status(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.edit_all")
        data = await request.json()
        old = get_incident(company["id"], incident_id, user)
        incident = workflow.change_status(company["id"], incident_id, user, data.get("status"),
                                          resolution_notes=data.get("resolution_notes"))
        log_action(company["id"], user["id"], "status", "incident", incident_id,
                   old_values={"status": old.get("status")}, new_values={"status": incident["status"]},
                   **client_meta(request))
        return {"ok": True, "incident": incident}

    @app.post(PREFIX + "/incidents/{incident_id}/comments")
    async def api_add_comment(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug)
        data = await request.json()
        comment = workflow.add_comment(company["id"], incident_id, user, data.get("text"))
        return {"ok": True, "comment": comment}

    @app.post(PREFIX + "/incidents/{incident_id}/investigation")
    async def api_start_investigation(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.investigate")
        data = await request.json()
        incident = workflow.start_investigation(company["id"], incident_id, user, data.get("investigator"))
        log_action(company["id"], user["id"], "investigate", "incident", incident_id,
                   new_values={"investigator": data.get("investigator")}, **client_meta(request))
        return {"ok": True, "incident": incident}

    @app.put(PREFIX + "/incidents/{incident_id}/investigation")
    async def api_update_investigation(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.investigate")
        data = await request.json()
        incident = workflow.update_investigation(company["id"], incident_id, user, data)
        return {"ok": True, "incident": incident}

    @app.post(PREFIX + "/incidents/{incident_id}/investigation/witnesses")
    async def api_add_witness(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.investigate")
        data = await request.json()
        incident = workflow.add_witness(company["id"], incident_id, user, data.get("name"), data.get("statement"))
        return {"ok": True, "incident": incident}

    @app.post(PREFIX + "/incidents/{incident_id}/actions")
    async def api_add_action(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.assign")
        data = await request.json()
        action = workflow.add_action(company["id"], incident_id, user, data)
        log_action(company["id"], user["id"], "create", "incident_action", action["id"],
                   new_values=action, **client_meta(request))
        return {"ok": True, "action": action}

    @app.post(PREFIX + "/incidents/{incident_id}/actions/{action_id}/ticket-status")
    async def api_action_ticket_status(slug: str, incident_id: str, action_id: str, request: Request):
        user, company = require_user(request, slug, permission="incidents.assign")
        data = await request.json()
        action = workflow.set_action_ticket_status(company["id"], incident_id, user, action_id,
                                                   data.get("status"), data.get("notes"))
        return {"ok": True, "action": action}

    @app.get(PREFIX + "/incidents/{incident_id}/timeline")
    async def api_incident_timeline(slug: str, incident_id: str, request: Request):
        user, company = require_user(request, slug)
        incident = get_incident(company["id"], incident_id, user)
        return {"ok": True, "events": workflow.build_timeline(incident)}

    # ============================================================
    # ANALYTICS
    # ============================================================

    @app.get(PREFIX + "/analytics")
    async def api_analytics(slug: str, request: Request):
        _, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        incidents = get_store("incidents").items_for_company(company["id"])
        locations = get_store("locations").count(company["id"])
        return {"ok": True, "analytics": analytics(incidents, locations, **_analytics_params(request))}

    @app.get(PREFIX + "/analytics/export.csv")
    async def api_analytics_export(slug: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES, permission="reports.export")
        p = _analytics_params(request)
        incidents = list_incidents(user, company["id"], severity=p["severity"], incident_type=p["incident_type"],
                                   location_id=p["location_id"], date_range=p["date_range"],
                                   custom_start=p["custom_start"], custom_end=p["custom_end"])
        rows = [{
            "Reference": i.get("reference_number"),
            "Title": i.get("title"),
            "Type": i.get("type"),
            "Severity": i.get("severity"),
            "Status": i.get("status"),
            "Location": location_name(i["location_id"]) if i.get("location_id") else UNASSIGNED,
            "Date": i.get("incident_date"),
        } for i in incidents]
        return Response(content=rows_to_csv(rows).encode("utf-8"), media_type="text/csv; charset=utf-8",
                        headers={"Content-Disposition": 'attachment; filename="incidents-analytics.csv"'})

    # ============================================================
    # TICKETS
    # ============================================================

    @app.get(PREFIX + "/tickets")
    async def api_list_tickets(slug: str, request: Request):
        _, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        q = request.query_params
        return {"ok": True, "tickets": list_tickets(company["id"], status=q.get("status"),
                                                    incident_id=q.get("incident_id"))}

    @app.post(PREFIX + "/tickets")
    async def api_create_ticket(slug: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        ticket = create_ticket(company["id"], user["id"], data)
        log_action(company["id"], user["id"], "create", "ticket", ticket["id"],
                   new_values=ticket, **client_meta(request))
        return {"ok": True, "ticket": ticket}

    @app.put(PREFIX + "/tickets/{ticket_id}")
    async def api_update_ticket(slug: str, ticket_id: str, request: Request):
        user, company = require_user(request, slug)
        ticket = get_ticket(company["id"], ticket_id)
        if not has_role(user, DASHBOARD_ROLES) and ticket.get("assigned_to") != user["id"]:
            raise PermissionDenied("Only managers or the assignee can update this ticket")
        data = await request.json()
        updated = update_ticket(company["id"], ticket_id, data)
        return {"ok": True, "ticket": updated}
