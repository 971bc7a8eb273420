"""
Health Check Route

Liveness probe. Does not touch the ledger.
"""

from fastapi import APIRouter

from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Returns service status for liveness probes."""
    return HealthResponse(ok=True, service="packvault-api", version="v1")
