"""
Health and readiness API.

Provides lightweight endpoints for operational monitoring without exposing secrets.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from adsflow.core.database import check_connection, get_engine

logger = logging.getLogger("adsflow")

router = APIRouter(tags=["health"])

REQUIRED_TABLES = ["profiles"]


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz():
    """Readiness check: profile store connectivity + required tables."""
    if not check_connection():
        logger.error("[readyz] profile store unreachable")
        return JSONResponse(status_code=503, content={"status": "error", "detail": "profile store unreachable"})

    try:
        inspector = inspect(get_engine())
        missing = [t for t in REQUIRED_TABLES if not inspector.has_table(t)]
    except SQLAlchemyError as e:
        logger.error(f"[readyz] schema inspection failed: {e}")
        return JSONResponse(status_code=503, content={"status": "error", "detail": "profile store unreachable"})

    if missing:
        detail = f"missing tables: {', '.join(missing)}"
        logger.warning(f"[readyz] {detail}")
        return JSONResponse(status_code=503, content={"status": "error", "detail": detail})

    return {"status": "ok"}
