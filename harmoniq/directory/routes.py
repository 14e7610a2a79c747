# ============================================================================
# Harmoniq Safety - Directory Routes
# ============================================================================
# Companies (platform + settings), locations, teams and users.
# ============================================================================

import logging

from fastapi import APIRouter, Request

from ..audit import client_meta, get_audit_log, log_action
from ..auth import require_user
from ..auth.permissions import ADMIN_ROLES, DASHBOARD_ROLES, permissions_for
from ..common.pagination import paginate
from ..errors import PermissionDenied
from . import models

logger = logging.getLogger("harmoniq.directory.routes")

router = APIRouter(prefix="/api/companies", tags=["directory"])


# ============================================================================
# Companies
# ============================================================================

@router.get("")
async def api_list_companies(request: Request):
    require_user(request, roles=("super_admin",))
    return {"ok": True, "companies": models.list_companies()}


@router.post("")
async def api_create_company(request: Request):
    user, _ = require_user(request, roles=("super_admin",))
    data = await request.json()
    company = models.create_company(data)
    log_action(company["id"], user["id"], "create", "company", company["id"],
               new_values=company, **client_meta(request))
    return {"ok": True, "company": company}


@router.get("/{slug}")
async def api_get_company(slug: str, request: Request):
    _, company = require_user(request, slug)
    return {"ok": True, "company": company, "seats_used": models.seats_used(company["id"])}


@router.put("/{slug}")
async def api_update_company(slug: str, request: Request):
    user, company = require_user(request, slug, permission="settings.edit")
    data = await request.json()
    if user.get("role") != "super_admin":
        # Billing fields are platform-managed
        for key in ("tier", "seat_limit", "status", "trial_ends_at"):
            data.pop(key, None)
    updated = models.update_company(company["id"], data)
    log_action(company["id"], user["id"], "update", "company", company["id"],
               old_values=company, new_values=updated, **client_meta(request))
    return {"ok": True, "company": updated}


@router.get("/{slug}/audit-log")
async def api_audit_log(slug: str, request: Request):
    _, company = require_user(request, slug, permission="settings.view")
    entity_type = request.query_params.get("entity_type")
    return {"ok": True, "entries": get_audit_log(company["id"], entity_type=entity_type)}


# ============================================================================
# Locations
# ============================================================================

@router.get("/{slug}/locations")
async def api_list_locations(slug: str, request: Request):
    _, company = require_user(request, slug)
    q = request.query_params
    locations = models.list_locations(company["id"], loc_type=q.get("type"), parent_id=q.get("parent_id"))
    return {"ok": True, "locations": locations}


@router.get("/{slug}/locations/tree")
async def api_location_tree(slug: str, request: Request):
    _, company = require_user(request, slug)
    return {"ok": True, "tree": models.location_tree(company["id"])}


@router.post("/{slug}/locations")
async def api_create_location(slug: str, request: Request):
    user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
    data = await request.json()
    loc = models.create_location(company["id"], data)
    log_action(company["id"], user["id"], "create", "location", loc["id"], new_values=loc)
    return {"ok": True, "location": loc}


@router.get("/{slug}/locations/{location_id}")
async def api_get_location(slug: str, location_id: str, request: Request):
    _, company = require_user(request, slug)
    return {"ok": True, "location": models.get_location_detail(company["id"], location_id)}


@router.put("/{slug}/locations/{location_id}")
async def api_update_location(slug: str, location_id: str, request: Request):
    user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
    data = await request.json()
    loc = models.update_location(company["id"], location_id, data)
    log_action(company["id"], user["id"], "update", "location", location_id, new_values=data)
    return {"ok": True, "location": loc}


@router.delete("/{slug}/locations/{location_id}")
async def api_delete_location(slug: str, location_id: str, request: Request):
    user, company = require_user(request, slug, roles=ADMIN_ROLES)
    models.delete_location(company["id"], location_id)
    log_action(company["id"], user["id"], "delete", "location", location_id)
    return {"ok": True}


# ============================================================================
# Teams
# ============================================================================

@router.get("/{slug}/teams")
async def api_list_teams(slug: str, request: Request):
    _, company = require_user(request, slug, permission="teams.view")
    return {"ok": True, "teams": models.list_teams(company["id"])}


@router.post("/{slug}/teams")
async def api_create_team(slug: str, request: Request):
    user, company = require_user(request, slug, permission="teams.create")
    data = await request.json()
    team = models.create_team(company["id"], data)
    log_action(company["id"], user["id"], "create", "team", team["id"], new_values=data)
    return {"ok": True, "team": team}


@router.get("/{slug}/teams/{team_id}")
async def api_get_team(slug: str, team_id: str, request: Request):
    _, company = require_user(request, slug, permission="teams.view")
    return {"ok": True, "team": models.get_team(company["id"], team_id)}


@router.put("/{slug}/teams/{team_id}")
async def api_update_team(slug: str, team_id: str, request: Request):
    user, company = require_user(request, slug, permission="teams.edit")
    data = await request.json()
    team = models.update_team(company["id"], team_id, data)
    log_action(company["id"], user["id"], "update", "team", team_id, new_values=data)
    return {"ok": True, "team": team}


@router.delete("/{slug}/teams/{team_id}")
async def api_delete_team(slug: str, team_id: str, request: Request):
    user, company = require_user(request, slug, permission="teams.delete")
    models.delete_team(company["id"], team_id)
    log_action(company["id"], user["id"], "delete", "team", team_id)
    return {"ok": True}


@router.post("/{slug}/teams/{team_id}/members")
async def api_add_team_member(slug: str, team_id: str, request: Request):
    user, company = require_user(request, slug, permission="teams.manage_members")
    data = await request.json()
    team = models.add_team_member(company["id"], team_id, data.get("user_id"))
    log_action(company["id"], user["id"], "add_member", "team", team_id, new_values=data)
    return {"ok": True, "team": team}


@router.delete("/{slug}/teams/{team_id}/members/{user_id}")
async def api_remove_team_member(slug: str, team_id: str, user_id: str, request: Request):
    user, company = require_user(request, slug, permission="teams.manage_members")
    team = models.remove_team_member(company["id"], team_id, user_id)
    log_action(company["id"], user["id"], "remove_member", "team", team_id, new_values={"user_id": user_id})
    return {"ok": True, "team": team}


# ============================================================================
# Users
# ============================================================================

@router.get("/{slug}/users")
async def api_list_users(slug: str, request: Request):
    _, company = require_user(request, slug, permission="users.view")
    q = request.query_params
    users = models.list_users(company["id"], role=q.get("role"), status=q.get("status"), search=q.get("search"))
    page = paginate(users, q.get("page", 1), q.get("per_page", 25))
    return {"ok": True, "users": page.pop("items"), **page}


@router.post("/{slug}/users")
async def api_create_user(slug: str, request: Request):
    user, company = require_user(request, slug, permission="users.create")
    data = await request.json()
    if data.get("role", "employee") != "employee" and "users.manage_roles" not in permissions_for(user):
        raise PermissionDenied("Missing permission: users.manage_roles")
    created = models.create_user(company, data)
    log_action(company["id"], user["id"], "create", "user", created["id"], new_values=data)
    return {"ok": True, "user": created}


@router.get("/{slug}/users/{user_id}")
async def api_get_user(slug: str, user_id: str, request: Request):
    viewer, company = require_user(request, slug)
    if viewer["id"] != user_id and "users.view" not in permissions_for(viewer):
        raise PermissionDenied("Missing permission: users.view")
    return {"ok": True, "user": models.get_user(company["id"], user_id)}


@router.put("/{slug}/users/{user_id}")
async def api_update_user(slug: str, user_id: str, request: Request):
    viewer, company = require_user(request, slug)
    data = await request.json()
    perms = permissions_for(viewer)
    if viewer["id"] != user_id and "users.edit" not in perms:
        raise PermissionDenied("Missing permission: users.edit")
    if ("role" in data or "custom_permissions" in data or "status" in data) and "users.manage_roles" not in perms:
        raise PermissionDenied("Missing permission: users.manage_roles")
    updated = models.update_user(company["id"], user_id, data)
    log_action(company["id"], viewer["id"], "update", "user", user_id, new_values=data)
    return {"ok": True, "user": updated}


@router.delete("/{slug}/users/{user_id}")
async def api_delete_user(slug: str, user_id: str, request: Request):
    viewer, company = require_user(request, slug, permission="users.delete")
    if viewer["id"] == user_id:
        raise PermissionDenied("You cannot delete your own account")
    models.delete_user(company["id"], user_id)
    log_action(company["id"], viewer["id"], "delete", "user", user_id)
    return {"ok": True}
