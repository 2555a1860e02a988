# tests/test_observability.py

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI
from httpx import AsyncClient
from prometheus_client import REGISTRY

from taskboard.observability.logging_config import add_app_name


def _requests(endpoint: str, status_code: str) -> float:
    value = REGISTRY.get_sample_value(
        "taskboard_request_total",
        {"method": "GET", "endpoint": endpoint, "status_code": status_code},
    )
    return value or 0.0


@pytest.mark.asyncio
async def test_request_context_carries_user_and_trace_id(app: FastAPI, client: AsyncClient) -> None:
    async def log_context():
        return structlog.contextvars.get_contextvars()

    app.add_api_route("/debug/log-context", log_context)

    response = await client.get(
        "/debug/log-context", params={"user": "alice"}, headers={"X-Trace-ID": "trace-1"}
    )

    assert response.json() == {"trace_id": "trace-1", "user": "alice"}


@pytest.mark.asyncio
async def test_request_context_without_user(app: FastAPI, client: AsyncClient) -> None:
    async def log_context():
        return structlog.contextvars.get_contextvars()

    app.add_api_route("/debug/log-context", log_context)

    response = await client.get("/debug/log-context")

    assert response.json()["user"] == "anonymous"


@pytest.mark.asyncio
async def test_metrics_label_by_route_template(client: AsyncClient) -> None:
    before = _requests("/tasks/finishTask", "200")

    await client.get("/tasks/finishTask", params={"user": "u"})

    assert _requests("/tasks/finishTask", "200") == before + 1


@pytest.mark.asyncio
async def test_unknown_paths_share_one_series(client: AsyncClient) -> None:
    before = _requests("unmatched", "404")

    await client.get("/wp-admin/setup.php")
    await client.get("/.env")

    assert _requests("unmatched", "404") == before + 2
    assert REGISTRY.get_sample_value(
        "taskboard_request_total",
        {"method": "GET", "endpoint": "/wp-admin/setup.php", "status_code": "404"},
    ) is None


def test_app_name_processor() -> None:
    processor = add_app_name("taskboard")

    assert processor(None, "info", {"event": "x"}) == {"event": "x", "app": "taskboard"}
    # an explicit app field wins
    assert processor(None, "info", {"event": "x", "app": "other"})["app"] == "other"
