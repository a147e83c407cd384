"""
Health Check Routes

Endpoints for service health monitoring.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..models.common import utcnow
from ..services.engine_service import get_engine_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "expocrm-api",
        "timestamp": utcnow().isoformat()
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - the database pool is open and answers queries.
    Used by orchestrators for readiness probes.
    """
    engine = get_engine_service()
    ready = engine.is_initialized and await engine.event_storage.ping()
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"ready": ready, "timestamp": utcnow().isoformat()},
    )


@router.get("/live")
async def liveness_check():
    """Liveness check - indicates if service is running."""
    return {
        "alive": True,
        "timestamp": utcnow().isoformat()
    }
