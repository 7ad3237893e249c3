"""
MedCamp Backend — Request Context Middleware
==============================================

What:  Assigns each request a correlation ID and writes one access log line
       per request.
How:   The ID comes from the client's X-Request-ID header or a fresh short
       UUID. It is stored in a ContextVar for loggers and exception
       handlers, on request.state for route handlers, and echoed back in the
       X-Request-ID response header.

Access log line:
    GET /camps 200 4.2ms [a1b2c3d4] from 127.0.0.1

    5xx → ERROR, 4xx → WARNING, everything else → INFO.
    /health is not logged.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local; concurrent requests share a thread
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("medcamp.access")

QUIET_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid

        path = request.url.path
        if path not in QUIET_PATHS:
            client_ip = request.client.host if request.client else "unknown"
            duration_ms = (time.perf_counter() - start) * 1000
            access_logger.log(
                _level_for(response.status_code),
                "%s %s %d %.1fms [%s] from %s",
                request.method,
                path,
                response.status_code,
                duration_ms,
                rid,
                client_ip,
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )
        return response
