# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness and readiness for monitoring and load balancers. Readiness
# checks the database, the storage bucket, the search cluster and the
# Celery broker.
# =============================================================================

from datetime import datetime, timezone

import redis
from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

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
    search: str
    broker: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unhealthy(error: Exception) -> str:
    return f"unhealthy: {str(error)[:50]}"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check():
    """
    Whether the service can serve requests.

    Reports "degraded" when any backing service fails its check.
    """
    from lib.search_client import SearchClient
    from lib.supabase_client import SupabaseClient

    checks = ChecksResponse(database="unknown", storage="unknown", search="unknown", broker="unknown")

    try:
        SupabaseClient.get_client().table("tenants").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = _unhealthy(e)

    try:
        SupabaseClient.get_client().storage.get_bucket(settings.STORAGE_BUCKET)
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = _unhealthy(e)

    try:
        checks.search = "healthy" if SearchClient.ping() else "unhealthy: no response"
    except Exception as e:
        checks.search = _unhealthy(e)

    try:
        redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2).ping()
        checks.broker = "healthy"
    except redis.RedisError as e:
        checks.broker = _unhealthy(e)

    all_healthy = all(value == "healthy" for value in checks.model_dump().values())

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Whether the process is alive."""
    return LivenessResponse(status="alive", timestamp=_now())
