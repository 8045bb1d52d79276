"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from edqorta.api.dependencies import SettingsDep, StorageDep

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
@router.get("/")
async def health_check(settings: SettingsDep) -> dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.app_env,
    }


@router.get("/ready")
async def readiness_check(storage: StorageDep) -> dict[str, Any]:
    """Readiness check - verifies the store is available."""
    checks = {"storage": await storage.health_check()}
    all_healthy = all(checks.values())

    return {
        "status": "ready" if all_healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """Liveness check - basic endpoint for kubernetes."""
    return {"status": "alive"}
