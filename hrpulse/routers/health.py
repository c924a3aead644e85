"""Health and probe routes.

MongoDB is required to serve anything. Redis only degrades the service:
without it every cache lookup is a miss and reads go to the database.
"""

from datetime import datetime
from typing import Any, Dict, Tuple

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hrpulse.core.config import get_settings
from hrpulse.database.mongodb import MongoDB
from hrpulse.database.redis_client import RedisClient
from hrpulse.utils.datetime_utils import utc_now
from hrpulse.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)
settings = get_settings()


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str
    services: Dict[str, Dict[str, Any]] = {}


def _health(overall: str, services: Dict[str, Dict[str, Any]]) -> HealthStatus:
    return HealthStatus(
        status=overall,
        timestamp=utc_now(),
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        services=services,
    )


async def _check_dependencies() -> Tuple[str, Dict[str, Dict[str, Any]]]:
    """Overall status (healthy, degraded or unhealthy) and one entry per dependency."""
    database_up = await MongoDB.ping()
    if not database_up:
        logger.error("Health check: MongoDB unreachable")

    if not settings.ENABLE_CACHE:
        cache_state = "disabled"
    elif await RedisClient.ping():
        cache_state = "healthy"
    else:
        logger.warning("Health check: Redis unreachable")
        cache_state = "unhealthy"

    services = {
        "database": {"status": "healthy" if database_up else "unhealthy", "type": "mongodb"},
        "cache": {"status": cache_state, "type": "redis"},
    }
    if not database_up:
        return "unhealthy", services
    return ("degraded" if cache_state == "unhealthy" else "healthy"), services


@router.get("/health", response_model=HealthStatus, summary="Basic health check")
async def health_check() -> HealthStatus:
    return _health("healthy", {})


@router.get("/health/detailed", response_model=HealthStatus, summary="Health of MongoDB and Redis")
async def detailed_health_check() -> HealthStatus:
    overall, services = await _check_dependencies()
    return _health(overall, services)


@router.get("/health/live", summary="Liveness probe")
async def liveness_probe() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready", summary="Readiness probe")
async def readiness_probe() -> JSONResponse:
    """``ready`` while MongoDB answers, otherwise ``not_ready`` with a 503."""
    if await MongoDB.ping():
        return JSONResponse({"status": "ready"})
    return JSONResponse({"status": "not_ready"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
