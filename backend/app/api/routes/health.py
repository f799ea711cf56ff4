"""Health Probes — liveness and database readiness for the orchestrator.

Invariants:
    - /health/ answers 200 whenever the process can serve requests
    - /health/ready answers 503 until the database round-trips a query

Design Decisions:
    - Readiness reads `database.db_manager` per call: before lifespan startup there is
      no manager, and that is reported as not ready rather than raised
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.infrastructure import database

SERVICE_NAME = "shelter-adoption-api"
SERVICE_VERSION = "1.0.0"

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is not None and await manager.health_check():
        return {"status": "ready", "checks": {"database": "healthy"}}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "checks": {"database": "unavailable"}},
        headers={"Retry-After": "5"},
    )
