"""
Health Check Routes.

Provides health and readiness endpoints for monitoring.
"""

import time

from fastapi import APIRouter, Depends

from tunesearch.api.deps import get_youtube_service
from tunesearch.api.schemas import HealthResponse, ReadinessResponse, ServiceHealth
from tunesearch.config import get_settings
from tunesearch.services.search.base import SearchService
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check.

    Returns 200 whenever the process can serve requests.
    """
    settings = get_settings()
    return HealthResponse(status="OK", service=settings.api.service_name)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(service: SearchService = Depends(get_youtube_service)):
    """
    Readiness check.

    Reports whether the YouTube upstream is configured and reachable.
    """
    start = time.time()
    healthy = await service.health_check()
    latency = (time.time() - start) * 1000

    youtube = ServiceHealth(
        name="youtube",
        healthy=healthy,
        latency_ms=latency,
        error=None if healthy else "YouTube API unreachable or API key not configured",
    )
    if not healthy:
        logger.warning("Readiness check: YouTube upstream unavailable")

    return ReadinessResponse(
        status="ready" if healthy else "not_ready",
        services=[youtube],
    )


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus exposition format for scraping.
    """
    from tunesearch.api.metrics import metrics_response
    return metrics_response()
