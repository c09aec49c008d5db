from __future__ import annotations

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("linkdash.access")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            url = request.url
            path = url.path
            if url.query:
                path = f"{path}?{url.query}"
            ip = request.headers.get("x-forwarded-for") or (request.client.host if request.client else None)
            logger.info(
                "%s %s status=%d duration_ms=%d ip=%s ua=%r",
                request.method,
                path,
                status_code,
                duration_ms,
                ip,
                request.headers.get("user-agent"),
            )
