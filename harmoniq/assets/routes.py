"""
Harmoniq Safety - Asset API Routes
"""
import logging

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import HTMLResponse, Response

from ..audit import client_meta, log_action
from ..auth import require_user
from ..auth.permissions import DASHBOARD_ROLES, has_role
from ..common.pagination import paginate
from ..directory.names import location_name
from ..errors import NotFound, PermissionDenied, ValidationError
from ..stores import get_store
from .alerts import compute_asset_alerts
from .csv_io import export_assets_csv, export_assets_xlsx, export_filename, import_assets_csv
from .models import (
    asset_health, create_asset, create_inspection, delete_asset, end_downtime,
    get_asset, get_asset_by_qr, get_asset_detail, get_asset_stats, get_assets,
    get_corrective_actions, get_inspections, start_downtime, update_asset,
    update_corrective_action,
)
from .qr import asset_qr_png, generate_batch_zip, generate_print_sheet

logger = logging.getLogger("harmoniq.assets.routes")

PREFIX = "/api/companies/{slug}"


def register_asset_routes(app: FastAPI):
    """Register asset, inspection, downtime and corrective action endpoints."""

    # ============================================================
    # COLLECTION VIEWS
    # ============================================================

    @app.get(PREFIX + "/assets")
    async def api_get_assets(slug: str, request: Request):
        _, company = require_user(request, slug)
        q = request.query_params
        assets = get_assets(
            company["id"],
            status=q.get("status"),
            category=q.get("category"),
            location_id=q.get("location_id"),
            criticality=q.get("criticality"),
            search=q.get("search"),
            include_retired=q.get("include_retired") == "true",
        )
        page = paginate(assets, q.get("page", 1), q.get("per_page", 25))
        return {"ok": True, "assets": page.pop("items"), **page}

    @app.get(PREFIX + "/assets/alerts")
    async def api_asset_alerts(slug: str, request: Request):
        _, company = require_user(request, slug)
        return {"ok": True, "alerts": compute_asset_alerts(get_assets(company["id"]))}

    @app.get(PREFIX + "/assets/stats")
    async def api_asset_stats(slug: str, request: Request):
        _, company = require_user(request, slug)
        return {"ok": True, "stats": get_asset_stats(company["id"])}

    @app.get(PREFIX + "/assets/export.csv")
    async def api_export_csv(slug: str, request: Request):
        _, company = require_user(request, slug, permission="reports.export")
        body = export_assets_csv(get_assets(company["id"], include_retired=True))
        return Response(content=body.encode("utf-8"), media_type="text/csv; charset=utf-8",
                        headers={"Content-Disposition": f'attachment; filename="{export_filename("csv")}"'})

    @app.get(PREFIX + "/assets/export.xlsx")
    async def api_export_xlsx(slug: str, request: Request):
        _, company = require_user(request, slug, permission="reports.export")
        body = export_assets_xlsx(get_assets(company["id"], include_retired=True))
        return Response(
            content=body,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f'attachment; filename="{export_filename("xlsx")}"'},
        )

    @app.post(PREFIX + "/assets/import")
    async def api_import_csv(slug: str, request: Request, file: UploadFile = File(...)):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        raw = await file.read()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("CSV must be UTF-8 encoded")
        result = import_assets_csv(company["id"], text, company.get("currency") or "USD")
        log_action(company["id"], user["id"], "import", "asset", None,
                   new_values=result, **client_meta(request))
        return {"ok": True, **result}

    @app.get(PREFIX + "/assets/scan/{qr_code}")
    async def api_scan_qr(slug: str, qr_code: str, request: Request):
        _, company = require_user(request, slug)
        asset = get_asset_by_qr(company["id"], qr_code)
        return {"ok": True, "asset": asset}

    # ============================================================
    # QR LABELS
    # ============================================================

    @app.post(PREFIX + "/assets/qr/batch")
    async def api_qr_batch(slug: str, request: Request):
        _, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        assets = [get_asset(company["id"], aid) for aid in data.get("asset_ids", [])]
        if not assets:
            raise ValidationError("No assets found")
        return Response(content=generate_batch_zip(assets), media_type="application/zip",
                        headers={"Content-Disposition": 'attachment; filename="asset-qr-codes.zip"'})

    @app.get(PREFIX + "/assets/qr/print-sheet")
    async def api_qr_print_sheet(slug: str, request: Request):
        _, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        assets = get_assets(company["id"], location_id=request.query_params.get("location_id"))
        for asset in assets:
            asset["location_name"] = location_name(asset.get("location_id")) if asset.get("location_id") else None
        return HTMLResponse(generate_print_sheet(assets))

    # ============================================================
    # SINGLE ASSET
    # ============================================================

    @app.post(PREFIX + "/assets")
    async def api_create_asset(slug: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        asset = create_asset(company["id"], data, company.get("currency") or "USD")
        log_action(company["id"], user["id"], "create", "asset", asset["id"],
                   new_values=asset, **client_meta(request))
        return {"ok": True, "asset": asset}

    @app.get(PREFIX + "/assets/{asset_id}")
    async def api_get_asset(slug: str, asset_id: str, request: Request):
        _, company = require_user(request, slug)
        return {"ok": True, "asset": get_asset_detail(company["id"], asset_id)}

    @app.put(PREFIX + "/assets/{asset_id}")
    async def api_update_asset(slug: str, asset_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        data = await request.json()
        old = get_asset(company["id"], asset_id)
        asset = update_asset(company["id"], asset_id, data)
        log_action(company["id"], user["id"], "update", "asset", asset_id,
                   old_values=old, new_values=asset, **client_meta(request))
        return {"ok": True, "asset": asset}

    @app.delete(PREFIX + "/assets/{asset_id}")
    async def api_delete_asset(slug: str, asset_id: str, request: Request):
        user, company = require_user(request, slug, roles=DASHBOARD_ROLES)
        asset = delete_asset(company["id"], asset_id)
        log_action(company["id"], user["id"], "retire", "asset", asset_id, **client_meta(request))
        logger.info("Asset %s retired by %s", asset_id, user["id"])
        return {"ok": True, "asset": asset}

    @app.get(PREFIX + "/assets/{asset_id}/health")
    async def api_asset_health(slug: str, asset_id: str, request: Request):
        _, company = require_user(request, slug)
        return {"ok": True, "health": asset_health(company["id"], asset_id)}

    @app.get(PREFIX + "/assets/{asset_id}/qr.png")
    async def api_asset_qr(slug: str, asset_id: str, request: Request):
        _, company = require_user(request, slug)
        asset = get_asset(company["id"], asset_id)
        return Response(content=asset_qr_png(asset), media_type="image/png",
                        headers={"Content-Disposition": f'inline; filename="{asset["asset_tag"]}-qr.png"'})

    # ============================================================
    # INSPECTIONS & DOWNTIME
    # ============================================================

    @app.get(PREFIX + "/assets/{asset_id}/inspections")
    async def api_get_inspections(slug: str, asset_id: str, request: Request):
        _, company = require_user(request, slug)
        get_asset(company["id"], asset_id)
        return {"ok": True, "inspections": get_inspections(company["id"], asset_id)}

    @app.post(PREFIX + "/assets/{asset_id}/inspections")
    async def api_submit_inspection(slug: str, asset_id: str, request: Request):
        user, company = require_user(request, slug, permission="checklists.complete")
        data = await request.json()
        inspection = create_inspection(company["id"], asset_id, user["id"], data)
        log_action(company["id"], user["id"], "create", "asset_inspection", inspection["id"],
                   new_values={"asset_id": asset_id, "result": inspection["result"]}, **client_meta(request))
        return {"ok": True, "inspection": inspection}

    @app.post(PREFIX + "/assets/{asset_id}/downtime")
    async def api_start_downtime(slug: str, asset_id: str, request: Request):
        user, company = require_user(request, slug)
        data = await request.json()
        log = start_downtime(company["id"], asset_id, user["id"], data)
        return {"ok": True, "downtime": log}

    @app.post(PREFIX + "/downtime/{log_id}/end")
    async def api_end_downtime(slug: str, log_id: str, request: Request):
        user, company = require_user(request, slug)
        try:
            data = await request.json()
        except ValueError:
            data = {}
        log = end_downtime(company["id"], log_id, user["id"], data or {})
        return {"ok": True, "downtime": log}

    # ============================================================
    # CORRECTIVE ACTIONS
    # ============================================================

    @app.get(PREFIX + "/corrective-actions")
    async def api_get_corrective_actions(slug: str, request: Request):
        _, company = require_user(request, slug)
        q = request.query_params
        actions = get_corrective_actions(company["id"], asset_id=q.get("asset_id"), status=q.get("status"))
        return {"ok": True, "actions": actions}

    @app.get(PREFIX + "/corrective-actions/{action_id}")
    async def api_get_corrective_action(slug: str, action_id: str, request: Request):
        _, company = require_user(request, slug)
        match = [a for a in get_corrective_actions(company["id"]) if a["id"] == action_id]
        if not match:
            raise NotFound("Corrective action not found")
        return {"ok": True, "action": match[0]}

    @app.put(PREFIX + "/corrective-actions/{action_id}")
    async def api_update_corrective_action(slug: str, action_id: str, request: Request):
        user, company = require_user(request, slug)
        current = get_store("corrective_actions").get_by_id(action_id)
        if not has_role(user, DASHBOARD_ROLES) and (current or {}).get("assigned_to") != user["id"]:
            raise PermissionDenied("Only managers or the assignee can update this action")
        data = await request.json()
        action = update_corrective_action(company["id"], action_id, data)
        log_action(company["id"], user["id"], "update", "corrective_action", action_id,
                   old_values=current, new_values=action, **client_meta(request))
        return {"ok": True, "action": action}
