"""Health Routes — liveness and database readiness.

Invariants:
    - GET /health answers 200 while the process runs, without touching the database
    - GET /health/ready answers 503 until the database responds
"""

from fastapi import APIRouter, Response, status

from shoplist import __version__
from shoplist.infrastructure import database

SERVICE_NAME = "shopping-list-api"

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness(response: Response):
    """Database check against the current db_manager."""
    manager = database.db_manager
    database_up = manager is not None and await manager.health_check()
    if not database_up:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ready" if database_up else "not_ready",
        "service": SERVICE_NAME,
        "version": __version__,
        "checks": {"database": "healthy" if database_up else "unreachable"},
    }
