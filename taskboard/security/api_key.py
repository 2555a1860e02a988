"""
Shared-secret access gate

When API_KEY is configured, every request must carry ?key=<k> where the
configured key starts with k. Rejections are answered with HTTP 200 and a
message body, the same shape as any other business refusal.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

log = structlog.get_logger()

NOT_AUTHORIZED_MESSAGE = "You are not authorized to use this api."

# operational endpoints stay reachable for health checks and scrapers
EXEMPT_PATHS = ("/health", "/metrics", "/config")


def is_exempt(path: str) -> bool:
    """Exact operational path, or a sub-path of one (/metrics/); /healthz is not exempt"""
    return any(path == p or path.startswith(p + "/") for p in EXEMPT_PATHS)


def key_matches(configured: str | None, supplied: str | None) -> bool:
    """Prefix key match: configured key must begin with the supplied (non-empty) key"""
    if not configured:
        return True
    if not supplied:
        return False
    return configured.startswith(supplied)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose key does not match before they reach a route"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if is_exempt(request.url.path):
            return await call_next(request)

        configured = request.app.state.context.api_key
        if not key_matches(configured, request.query_params.get("key")):
            log.warning("api key rejected", path=request.url.path)
            return JSONResponse({"message": NOT_AUTHORIZED_MESSAGE})

        return await call_next(request)
