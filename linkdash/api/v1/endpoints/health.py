import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from linkdash import __version__
from linkdash.core.config import Settings
from linkdash.core.dependencies import get_app_settings

router = APIRouter(tags=["health"])

_started = time.monotonic()


@router.get("/health")
def health(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - _started, 3),
        "environment": settings.environment,
        "version": __version__,
    }
