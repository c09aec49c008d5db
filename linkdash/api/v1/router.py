from fastapi import APIRouter, Depends

from linkdash.api.v1.endpoints import auth, brands, health, links, sessions, stats
from linkdash.core.security import require_session

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)

_protected = [Depends(require_session)]
api_router.include_router(brands.router, dependencies=_protected)
api_router.include_router(links.router, dependencies=_protected)
api_router.include_router(sessions.router, dependencies=_protected)
api_router.include_router(stats.router, dependencies=_protected)
