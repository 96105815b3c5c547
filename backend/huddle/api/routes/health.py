"""Health Routes — liveness and database readiness.

Invariants:
    - /health/ answers 200 whenever the process serves requests
    - /health/ready answers 503 until the database round-trips
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from huddle.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE = {"service": "huddle-api", "version": "1.0.0"}


@router.get("/")
async def health_check():
    return {"status": "healthy", **SERVICE}


@router.get("/ready")
async def readiness_check():
    # db_manager is read per call: it is only set once the lifespan has run
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}, **SERVICE}
