# depth_charts/main.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from depth_charts import models  # noqa: F401  (import registers models with Base)

# --- DB bootstrapping: create tables at startup ---
from depth_charts.db import Base, engine

from .errors import DepthChartError

# Routers
from .routers import (
    charts,
    health,
    permissions,
    players,
    positions,
    teams,
)

# ---------- App ----------
app = FastAPI(title="Depth Chart Engine", version="0.1.0")


# Create tables once on app start
@app.on_event("startup")
def _create_tables() -> None:
    Base.metadata.create_all(bind=engine)


# ---------- Minimal structured logging ----------
logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger("depth_charts")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    duration_ms = (time.perf_counter() - start) * 1000.0
    log_obj = {
        "msg": "request",
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "duration_ms": round(duration_ms, 2),
        "user": request.headers.get("X-User-Id") or None,
        "idempotency_key": request.headers.get("Idempotency-Key") or None,
    }
    logger.info(json.dumps(log_obj, separators=(",", ":")))
    return response


# ---------- Errors: every failure is {kind, message} ----------
@app.exception_handler(DepthChartError)
async def _domain_error(request: Request, exc: DepthChartError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    message = f"{where}: {first.get('msg', 'invalid request')}" if where else "invalid request"
    return JSONResponse(
        status_code=422,
        content={"kind": "validation", "message": message, "errors": json.loads(json.dumps(errors, default=str))},
    )


def _include_router_flex(app: FastAPI, module) -> None:
    for attr in ("router", "route"):
        if hasattr(module, attr):
            app.include_router(getattr(module, attr))
            return
    name = getattr(module, "__name__", str(module))
    raise RuntimeError(f"Module {name} does not define `router` or `route`")


# ---------- Include Routers ----------
_include_router_flex(app, health)  # /health
_include_router_flex(app, teams)  # /teams
_include_router_flex(app, players)  # /players
_include_router_flex(app, permissions)  # /permissions
_include_router_flex(app, charts)  # /depth-charts, /teams/{id}/depth-charts
_include_router_flex(app, positions)  # /positions, /assignments
