"""
/tasks endpoints: task operations over query-string GETs + SSE task stream

Endpoints:
- GET /tasks, /tasks/  SSE stream of full task-list snapshots
- GET /tasks/createTask  user, task
- GET /tasks/finishTask  user
- GET /tasks/deleteTask  user, optional id
- GET /tasks/resetAll  user (admin only)

Status codes: 201 when the list changed, 200 for refusals / empty states,
400 for an invalid submission (see task_validation_handler).
"""

import asyncio
import json
from collections.abc import AsyncIterator

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.context import ServiceContext, get_context, get_db
from taskboard.tasks import TaskResult, TaskService, TaskValidationError

router = APIRouter(prefix="/tasks", tags=["tasks"])
log = structlog.get_logger()


def get_task_service(
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
) -> TaskService:
    """FastAPI dependency: TaskService bound to this request's session"""
    return context.task_service(db)


def _respond(result: TaskResult) -> JSONResponse:
    return JSONResponse(
        {"message": result.message},
        status_code=201 if result.changed else 200,
    )


async def task_validation_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    """TaskValidationError → 400 with the per-field messages"""
    log.info("task submission invalid", path=request.url.path, errors=exc.errors)
    return JSONResponse(
        {"message": exc.message, "error": exc.errors},
        status_code=400,
    )


# ── SSE stream ──

def _sse_event(data: list | dict) -> str:
    """Format one SSE event (default "message" type)"""
    return f"data: {json.dumps(data, ensure_ascii=False)}\n\n"


async def snapshot_stream(request: Request, context: ServiceContext) -> AsyncIterator[str]:
    """Current snapshot right away, then one event per change until the client leaves"""
    queue = context.registry.subscribe()
    log.info("task stream opened", subscribers=len(context.registry))
    keepalive = context.settings.SSE_KEEPALIVE_SECONDS

    try:
        # subscribed before reading, so a change racing the first read is still delivered
        yield _sse_event(await context.notifier.snapshot())

        while not await request.is_disconnected():
            try:
                snapshot = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield _sse_event(snapshot)

    except Exception as e:
        log.error("task stream failed", error=str(e), exc_info=True)
    finally:
        context.registry.unsubscribe(queue)
        log.info("task stream closed", subscribers=len(context.registry))


@router.get("")
@router.get("/")
async def stream_tasks(request: Request, context: ServiceContext = Depends(get_context)):
    """Open the task-list event stream"""
    return StreamingResponse(
        snapshot_stream(request, context),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


# ── Task operations ──

@router.get("/createTask")
async def create_task(
    user: str = "",
    task: str = "",
    service: TaskService = Depends(get_task_service),
):
    """Submit the caller's one open task"""
    return _respond(await service.create_task(user, task))


@router.get("/finishTask")
async def finish_task(user: str = "", service: TaskService = Depends(get_task_service)):
    """Mark the caller's open task as finished"""
    return _respond(await service.finish_task(user))


@router.get("/deleteTask")
async def delete_task(
    user: str = "",
    id: str | None = None,
    service: TaskService = Depends(get_task_service),
):
    """Delete a task by id, or the caller's open task when no id is given"""
    return _respond(await service.delete_task(user, id))


@router.get("/resetAll")
async def reset_all(user: str = "", service: TaskService = Depends(get_task_service)):
    """Wipe every task (admin only)"""
    return _respond(await service.reset_all(user))
