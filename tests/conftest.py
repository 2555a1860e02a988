# tests/conftest.py

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskboard.config import Settings
from taskboard.context import ServiceContext
from taskboard.db.engine import init_db
from taskboard.main import create_app
from taskboard.tasks import TaskService


@pytest.fixture()
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """
    Settings on a per-test SQLite file.

    The .env file is ignored and the access gate is off unless a test
    passes API_KEY explicitly.
    """

    def _make(**overrides) -> Settings:
        values = {
            "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}",
            "API_KEY": None,
            "API_URL": None,
            "ADMIN_USER": "thedabolical",
            "SSE_KEEPALIVE_SECONDS": 0.05,
            "SUBSCRIBER_QUEUE_SIZE": 16,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest_asyncio.fixture()
async def make_app(make_settings) -> AsyncIterator[Callable[..., FastAPI]]:
    """Application factory; tables are created up front since ASGITransport skips lifespan."""
    apps: list[FastAPI] = []

    async def _make(**overrides) -> FastAPI:
        application = create_app(make_settings(**overrides))
        await init_db(application.state.context.engine)
        apps.append(application)
        return application

    yield _make

    for application in apps:
        await application.state.context.engine.dispose()


@pytest_asyncio.fixture()
async def app(make_app) -> FastAPI:
    return await make_app()


@pytest.fixture()
def context(app: FastAPI) -> ServiceContext:
    return app.state.context


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture()
async def service(context: ServiceContext) -> AsyncIterator[TaskService]:
    async with context.session_factory() as db:
        yield context.task_service(db)
