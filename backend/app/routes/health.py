"""
Realty CRM API - Health Check Routes
======================================

What:  Liveness and readiness endpoints for monitoring and load balancers.
How:   Liveness answers without touching dependencies; readiness runs
       `SELECT 1` through the shared engine.

Status levels:
    GET /api/v1/health        200 {"status": "ok"}
    GET /api/v1/health/ready  200 {"status": "ok", "database": "connected"}
                              503 {"status": "unavailable", "database": "disconnected"}
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.database import engine
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Readiness probe",
)
async def readiness_check():
    """
    Probe the database with a lightweight query.

    Returns 503 while the database is unreachable so load balancers stop
    routing traffic to this instance.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check: database unreachable: %s", str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "database": "disconnected"},
        )

    return HealthResponse(status="ok", database="connected")
