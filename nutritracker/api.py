# -*- coding: utf-8 -*-
"""
NutriTracker API

Profile and nutrition goals, food search and barcode lookup, food and steps
logging, and analytics over the logged history.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.security import get_current_user_from_request
from .analytics.api import router as analytics_router
from .food_log.api import router as food_log_router
from .foods.api import router as foods_router
from .profile.api import router as profile_router
from .steps.api import router as steps_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="NutriTracker",
    description="Nutrition goals, food and steps logging, analytics",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path)


# Some test clients never trigger startup events.
init_app_db(settings.db_path)


_AUTH_EXEMPT_PREFIXES = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if (
        path.startswith("/api")
        and path != "/api/health"
        and request.method != "OPTIONS"
        and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES)
    ):
        try:
            request.state.user = get_current_user_from_request(request)
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return await call_next(request)


app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(foods_router)
app.include_router(food_log_router)
app.include_router(steps_router)
app.include_router(analytics_router)


@app.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "version": app.version,
        "timestamp": datetime.now().isoformat(),
    }


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = os.environ.get("NUTRI_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("NUTRI_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        logger.warning("Invalid port %r, falling back to 8000", port_raw)
        port = 8000

    uvicorn.run("nutritracker.api:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    run()
