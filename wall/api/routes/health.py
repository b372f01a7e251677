"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if storage is unreachable (readiness)
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from wall import __version__
from wall.api.dependencies import get_storage
from wall.core.repository_protocols import StorageAdapter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "x402-message-wall",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(storage: StorageAdapter = Depends(get_storage)):
    """Readiness probe — includes storage connectivity."""
    if not await storage.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {"storage": "healthy", "backend": storage.backend_name},
    }
