"""Health & Service Info — liveness probe and the root endpoint map.

Invariants:
    - GET /health always returns 200 if the process is up
    - GET / lists the public entry points; it never touches the stores

Design Decisions:
    - Memory reported as peak RSS from getrusage: no extra dependency for one number
"""

import logging
import resource
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

ENDPOINTS = {
    "health": "/health",
    "users": "/api/users",
    "users-stats": "/api/users/stats/count",
    "contact": "/api/contact",
    "contact-stats": "/api/contact/stats",
}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    settings = request.app.state.settings
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "memory": {"maxRss": usage.ru_maxrss},
        "environment": settings.environment,
        "version": settings.app_version,
    }


@router.get("/")
async def service_info(request: Request):
    settings = request.app.state.settings
    return {
        "message": "Welcome to Sample Test API",
        "version": settings.app_version,
        "endpoints": ENDPOINTS,
        "environment": settings.environment,
    }
