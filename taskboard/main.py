"""
FastAPI application entry point
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from taskboard.api.client import router as client_router
from taskboard.api.health import router as health_router
from taskboard.api.tasks import router as tasks_router
from taskboard.api.tasks import task_validation_handler
from taskboard.config import Settings, get_settings
from taskboard.context import ServiceContext
from taskboard.db.engine import init_db
from taskboard.observability.logging_config import setup_logging
from taskboard.observability.metrics_middleware import MetricsMiddleware
from taskboard.observability.request_logger import RequestLoggerMiddleware
from taskboard.security.api_key import ApiKeyMiddleware
from taskboard.tasks import TaskValidationError

log = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around a fresh ServiceContext"""
    settings = settings or get_settings()
    context = ServiceContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        """Startup: create tables and check the database; shutdown: release the pool"""
        log.info("app starting", env=settings.ENV, app=settings.APP_NAME)

        await init_db(context.engine)
        log.info("database ready", dialect=context.engine.dialect.name)
        if context.api_key is None:
            log.warning("API_KEY not set, access gate disabled")

        yield

        await context.engine.dispose()
        log.info("app stopped, resources released")

    application = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.context = context

    application.add_exception_handler(TaskValidationError, task_validation_handler)

    # ── Middleware (registered bottom-up, executed top-down) ──
    application.add_middleware(ApiKeyMiddleware)
    application.add_middleware(RequestLoggerMiddleware)
    application.add_middleware(MetricsMiddleware)

    # ── Prometheus endpoint ──
    application.mount("/metrics", make_asgi_app())

    # ── Routers ──
    application.include_router(health_router)
    application.include_router(client_router)
    application.include_router(tasks_router)

    return application


settings = get_settings()

# logging is configured at import time
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL, app_name=settings.APP_NAME)

app = create_app(settings)


def run() -> None:
    """Console entry point: serve on HOST:PORT"""
    uvicorn.run("taskboard.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
