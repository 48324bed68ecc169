# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str
    workers: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=utc_now().isoformat(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Checks database (subscription_plans is readable), storage
    connectivity and that a Celery worker answers a ping. Reports
    "degraded" instead of failing so the load balancer can decide.
    """
    from lib.supabase_client import SupabaseClient

    checks = ChecksResponse(database="unknown", storage="unknown", workers="unknown")

    # Check database
    try:
        client = SupabaseClient.get_client()
        client.table("subscription_plans").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: database check failed: {e}")
        checks.database = f"unhealthy: {str(e)[:50]}"

    # Check storage
    try:
        client = SupabaseClient.get_client()
        client.storage.list_buckets()
        checks.storage = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: storage check failed: {e}")
        checks.storage = f"unhealthy: {str(e)[:50]}"

    # Check workers
    try:
        from workers.celery_app import ping_workers

        checks.workers = "healthy" if ping_workers() > 0 else "unhealthy: no worker answered"
    except Exception as e:
        logger.warning(f"Readiness: worker check failed: {e}")
        checks.workers = f"unhealthy: {str(e)[:50]}"

    all_healthy = all(
        status == "healthy" for status in (checks.database, checks.storage, checks.workers)
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=utc_now().isoformat(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=utc_now().isoformat(),
    )
