"""
Harmoniq Safety - Maintenance API Routes
"""
from fastapi import FastAPI, Request

from ..audit import client_meta, log_action
from ..auth import require_user
from ..auth.permissions import DASHBOARD_ROLES, has_role
from ..errors import PermissionDenied
from .models import (
    complete_schedule, create_schedule, create_work_order, delete_schedule,
    get_maintenance_overview, get_schedule, get_schedules, get_work_order,
    get_work_orders, transition_work_order, update_schedule, update_work_order,
    work_order_summary,
)

PREFIX = "/api/companies/{slug}"


async def _json_or_empty(request: Request) -> dict:
    body = await request.body()
    return await request.json() if body else {}


def register_maintenance_routes(app: FastAPI):
    """Register maintenance schedule and work order endpoints."""

    # ============================================================
    # SCHEDULES
    # ============================================================

    @app.get(PREFIX + "/maintenance")
    async def api_maintenance_overview(slug: str, request: Request):
        _, company = require_user(request, slug)
        state = request.query_params.get("state")
        overview = get_maintenance_overview(company["id"])
        if state:
            overview["schedules"] = [s for s in overview["schedules"] if s["state"] == state]
        return {"ok": True, **overview}

    @app.get(PREFIX + "/assets/{asset_id}/schedules")
    async def api_asset_schedules(slug: str, asset_id: str, request: Request):
        _, company = require_user(request, slug)
        return {"ok": True, "schedules": get_schedules(company["id"], asset_id=asset_id)}

    @app.post(PREFIX + "/assets/{asset_id}/schedules")
    async def api_create_schedule(slug: str, asset_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        schedule = create_schedule(company["id"], asset_id, data)
        log_action(company["id"], user["id"], "create", "maintenance_schedule", schedule["id"],
                   new_values=schedule, **client_meta(request))
        return {"ok": True, "schedule": schedule}

    @app.put(PREFIX + "/maintenance/{schedule_id}")
    async def api_update_schedule(slug: str, schedule_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        schedule = update_schedule(company["id"], schedule_id, data)
        log_action(company["id"], user["id"], "update", "maintenance_schedule", schedule_id,
                   new_values=data, **client_meta(request))
        return {"ok": True, "schedule": schedule}

    @app.delete(PREFIX + "/maintenance/{schedule_id}")
    async def api_delete_schedule(slug: str, schedule_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        delete_schedule(company["id"], schedule_id)
        log_action(company["id"], user["id"], "delete", "maintenance_schedule", schedule_id,
                   **client_meta(request))
        return {"ok": True}

    @app.post(PREFIX + "/maintenance/{schedule_id}/complete")
    async def api_complete_schedule(slug: str, schedule_id: str, request: Request):
        user, company = require_user(request, slug)
        schedule = get_schedule(company["id"], schedule_id)
        if not has_role(user, DASHBOARD_ROLES) and schedule.get("assigned_to_user_id") != user["id"]:
            raise PermissionDenied("Only managers or the assigned technician can complete this schedule")
        result = complete_schedule(company["id"], schedule_id, user["id"], await _json_or_empty(request))
        log_action(company["id"], user["id"], "complete", "maintenance_schedule", schedule_id,
                   new_values={"next_due_date": result["schedule"]["next_due_date"]}, **client_meta(request))
        return {"ok": True, **result}

    # ============================================================
    # WORK ORDERS
    # ============================================================

    @app.get(PREFIX + "/work-orders")
    async def api_get_work_orders(slug: str, request: Request):
        _, company = require_user(request, slug)
        q = request.query_params
        orders = get_work_orders(company["id"], status=q.get("status"), assigned_to=q.get("assigned_to"))
        return {"ok": True, "work_orders": orders, "summary": work_order_summary(company["id"])}

    @app.post(PREFIX + "/work-orders")
    async def api_create_work_order(slug: str, request: Request):
        user, company = require_user(request, slug)
        data = await request.json()
        order = create_work_order(company["id"], user["id"], data)
        log_action(company["id"], user["id"], "create", "work_order", order["id"],
                   new_values=order, **client_meta(request))
        return {"ok": True, "work_order": order}

    @app.put(PREFIX + "/work-orders/{order_id}")
    async def api_update_work_order(slug: str, order_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        order = update_work_order(company["id"], order_id, data)
        return {"ok": True, "work_order": order}

    @app.post(PREFIX + "/work-orders/{order_id}/status")
    async def api_work_order_status(slug: str, order_id: str, request: Request):
        user, company = require_user(request, slug)
        order = get_work_order(company["id"], order_id)
        if not has_role(user, DASHBOARD_ROLES) and order.get("assigned_to") != user["id"]:
            raise PermissionDenied("Only managers or the assigned technician can change status")
        data = await request.json()
        updated = transition_work_order(company["id"], order_id, data.get("status"))
        log_action(company["id"], user["id"], "status", "work_order", order_id,
                   old_values={"status": order.get("status")}, new_values={"status": updated["status"]},
                   **client_meta(request))
        return {"ok": True, "work_order": updated}
