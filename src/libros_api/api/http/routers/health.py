"""Health check endpoints router for monitoring service availability."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from libros_api.api.http.deps import get_database_service
from libros_api.core.services.database.db_session import DbEngineService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": "libros-api"}


@router.get("/ready", response_model=None)
async def readiness(
    database_service: Annotated[DbEngineService, Depends(get_database_service)],
) -> dict[str, Any] | JSONResponse:
    """Readiness check - validates database connectivity.

    Returns 200 when the database answers, 503 otherwise.
    """
    db_healthy = await database_service.health_check()
    payload = {
        "status": "ready" if db_healthy else "not_ready",
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": database_service.backend,
                "pool": database_service.get_pool_status(),
            }
        },
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=payload)
    return payload
