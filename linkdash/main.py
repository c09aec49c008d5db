from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from linkdash import __version__
from linkdash.api.v1.router import api_router
from linkdash.core.config import Settings, get_settings
from linkdash.core.errors import DashboardError
from linkdash.core.logging_config import configure_logging
from linkdash.infrastructure.store import DashboardStore, build_store
from linkdash.middleware.request_log import RequestLogMiddleware
from linkdash.services.links_api import LinkApiClient

logger = logging.getLogger(__name__)


async def _dashboard_error_handler(request: Request, exc: DashboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.error, exc.message)
    else:
        logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers() or None)


async def _http_error_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]
    logger.warning("Validation error %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=400, content={"error": "Validation error", "details": details})


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[DashboardStore] = None,
    link_client: Optional[LinkApiClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s env=%s storage=%s", settings.app_name, settings.environment, settings.storage_backend)
        yield
        app.state.link_client.close()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.link_client = link_client or LinkApiClient.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    app.add_exception_handler(DashboardError, _dashboard_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/")
    def root():
        return {"status": "ok", "app": settings.app_name}

    return app
