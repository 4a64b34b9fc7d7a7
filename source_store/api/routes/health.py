"""
Health check endpoint.
"""

import time

from fastapi import APIRouter, Depends

from source_store.api.dependencies import get_database
from source_store.api.models import HealthResponse
from source_store.storage.database import Database

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Check database connectivity",
)
async def health(db: Database = Depends(get_database)) -> HealthResponse:
    start = time.perf_counter()
    healthy = await db.health_check()
    latency_ms = (time.perf_counter() - start) * 1000
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        database=healthy,
        latency_ms=round(latency_ms, 2),
    )
