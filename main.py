# ============================================================================
# Harmoniq Safety - Backend
# ============================================================================
# Multi-tenant workplace safety & asset management API.
#
#   uvicorn main:app --reload
#
# Feature packages live under harmoniq/ and register their own routes.
# Configuration comes from HARMONIQ_* environment variables (harmoniq/config.py).
# ============================================================================

import json
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from harmoniq import __version__, config
from harmoniq.assets import register_asset_routes
from harmoniq.auth.routes import router as session_router
from harmoniq.checklists import register_checklist_routes
from harmoniq.db import _ts, init_db
from harmoniq.directory import router as directory_router
from harmoniq.errors import HarmoniqError
from harmoniq.incidents import register_incident_routes
from harmoniq.maintenance import register_maintenance_routes
from harmoniq.notifications import init_scheduler, register_notification_routes, shutdown_scheduler
from harmoniq.public import router as public_router
from harmoniq.risk import register_risk_routes
from harmoniq.stores import load_all_stores

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("harmoniq")

# ================================================================
# FASTAPI APP
# ================================================================

app = FastAPI(title=config.APP_NAME, version=__version__)
app.add_middleware(SessionMiddleware, secret_key=config.SECRET_KEY)


@app.exception_handler(HarmoniqError)
async def _harmoniq_error(request: Request, exc: HarmoniqError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.message})


@app.exception_handler(json.JSONDecodeError)
async def _bad_json(request: Request, exc: json.JSONDecodeError):
    return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid JSON body"})


@app.on_event("startup")
async def _startup():
    init_db()
    load_all_stores()
    if config.SCHEDULER_ENABLED:
        init_scheduler()
    logger.info("%s backend started", config.APP_NAME)


@app.on_event("shutdown")
async def _shutdown():
    shutdown_scheduler()


# ================================================================
# HEALTH
# ================================================================

@app.get("/api/ping")
async def ping():
    return {"ok": True}


@app.get("/api/health")
async def health():
    return {"ok": True, "app": config.APP_NAME, "version": __version__, "time": _ts()}


# ================================================================
# FEATURE ROUTES
# ================================================================

app.include_router(public_router)
app.include_router(session_router)
app.include_router(directory_router)
register_asset_routes(app)
register_maintenance_routes(app)
register_incident_routes(app)
register_checklist_routes(app)
register_risk_routes(app)
register_notification_routes(app)
