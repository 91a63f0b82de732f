"""
OrderDesk Backend - Health Check Route
======================================

What:  GET /health for container and load-balancer health checks.
How:   Runs SELECT 1 against the store. healthy → 200, unhealthy → 503.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from orderdesk import __version__
from orderdesk.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request) -> JSONResponse:
    db_status = "connected"
    overall = "healthy"

    database = getattr(request.app.state, "database", None)
    try:
        if database is None:
            raise RuntimeError("database is not configured")
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(),
    )
