"""
Request logging middleware: one line when a request starts and one when it ends

Each request binds trace_id and the calling user (?user=) into the structlog
context, so every task log written while serving it names the caller.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger()

ANONYMOUS = "anonymous"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """HTTP request log lines + trace_id / user context"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
        user = request.query_params.get("user") or ANONYMOUS

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id, user=user)

        start = time.monotonic()

        # path only, the query string carries the access key
        log.info(
            "request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        response = await call_next(request)

        # for the task stream this is time-to-headers, the body keeps flowing
        duration_ms = int((time.monotonic() - start) * 1000)

        log.info(
            "request finished",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)

        return response
