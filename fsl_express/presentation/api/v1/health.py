import resource
import time
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter

from ....config import settings

router = APIRouter(tags=["health"])
logger = structlog.get_logger()

_started = time.monotonic()


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _uptime_seconds() -> float:
    return round(time.monotonic() - _started, 3)


@router.get("/", summary="Liveness")
async def root() -> dict:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {
        "service": settings.service_name,
        "status": "alive",
        "timestamp": _now(),
        "uptime": _uptime_seconds(),
        "memory": {"max_rss_kb": usage.ru_maxrss},
        "version": settings.service_version,
    }


@router.get("/health", summary="Health check")
async def health() -> dict:
    """Basic health check for load balancer."""
    return {
        "status": "healthy",
        "timestamp": _now(),
        "uptime": _uptime_seconds(),
        "service": settings.service_name,
    }


@router.get("/wake", summary="Wake-up ping")
async def wake() -> dict:
    """Hit by an external pinger to keep free-tier hosts from idling."""
    now = _now()
    logger.info("Wake-up ping received", timestamp=now)
    return {
        "message": "Service is awake!",
        "service": settings.service_name,
        "timestamp": now,
        "uptime": _uptime_seconds(),
        "status": "active",
    }
