"""
HISS Backend — Access Log Middleware
=====================================

What:  One log line per API request: method, path, status, duration,
       request ID and client address.
How:   Level follows the status class (5xx ERROR, 4xx WARNING, else INFO)
       so alerting can filter on severity.

Not logged: request bodies. Feature submissions carry patient and encounter
identifiers and report texts are clinical documents.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hiss.middleware.request_id import request_id_var

logger = logging.getLogger("hiss.access")

# Probes and front-end assets would drown the API lines
QUIET_PREFIXES = ("/health", "/static", "/favicon.ico")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
