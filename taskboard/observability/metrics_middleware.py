"""
Request metrics middleware: method, route, status code and duration per request

The endpoint label is the matched route template (/tasks/createTask), never the
raw URL, so unknown paths and gate rejections share one "unmatched" series.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from taskboard.observability.metrics import REQUEST_DURATION, REQUEST_TOTAL

# /metrics itself, health checks and the long-lived task stream
SKIPPED_PATHS = ("/metrics", "/metrics/", "/health", "/tasks", "/tasks/")

UNMATCHED = "unmatched"


def route_label(request: Request) -> str:
    """Template of the route that served the request; routing fills scope["route"]"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED


class MetricsMiddleware(BaseHTTPMiddleware):
    """HTTP request metrics"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        endpoint = route_label(request)
        method = request.method
        status = str(response.status_code)

        REQUEST_TOTAL.labels(method=method, endpoint=endpoint, status_code=status).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration_ms)

        return response
