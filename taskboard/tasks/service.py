"""
Task service: the one-open-task-per-user state machine

Rules:
- a user may hold a single unfinished task at a time
- only the owner may delete a task, except the admin identity
- only the admin identity may wipe the whole list

Every successful mutation is followed by a fresh snapshot pushed to the stream
subscribers. Refusals return a TaskResult with changed=False; only an invalid
submission raises (TaskValidationError).
"""

import structlog
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.observability.metrics import TASK_OPERATION_TOTAL
from taskboard.tasks.errors import TaskValidationError
from taskboard.tasks.notifier import TaskNotifier
from taskboard.tasks.schemas import (
    DELETE_UNAUTHORIZED,
    NO_OPEN_TASKS,
    RESET_FORBIDDEN,
    TASK_FINISHED,
    TASK_NOT_FOUND,
    TASK_OPEN_EXISTS,
    TASK_REMOVED,
    TASK_SUBMITTED,
    TASKS_RESET,
    TaskResult,
    TaskSubmission,
)
from taskboard.tasks.store import TaskStore

log = structlog.get_logger()


def parse_task_id(raw: str | int | None) -> int | None:
    """Query-string id → int; blank or non-numeric values (e.g. "undefined") mean "no id" """
    if raw is None or isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return None


class TaskService:
    """Task operations for a single request"""

    def __init__(self, db: AsyncSession, notifier: TaskNotifier, admin_user: str):
        self._store = TaskStore(db)
        self._notifier = notifier
        self._admin_user = admin_user

    def is_admin(self, user: str) -> bool:
        return user.lower() == self._admin_user.lower()

    async def create_task(self, user: str, task: str) -> TaskResult:
        try:
            submission = TaskSubmission(user=user, task=task)
        except ValidationError as e:
            TASK_OPERATION_TOTAL.labels(operation="create", outcome="invalid").inc()
            raise TaskValidationError([err["msg"] for err in e.errors()]) from e

        if await self._store.find_open(submission.user):
            TASK_OPERATION_TOTAL.labels(operation="create", outcome="conflict").inc()
            return TaskResult(TASK_OPEN_EXISTS)

        row = await self._store.create(submission.user, submission.task)
        log.info("task created", task_id=row.id, user=row.user)
        TASK_OPERATION_TOTAL.labels(operation="create", outcome="created").inc()

        await self._notifier.notify()
        return TaskResult(TASK_SUBMITTED, changed=True)

    async def finish_task(self, user: str) -> TaskResult:
        row = await self._store.find_open(user)
        if row is None:
            TASK_OPERATION_TOTAL.labels(operation="finish", outcome="no_open").inc()
            return TaskResult(NO_OPEN_TASKS)

        await self._store.mark_finished(row)
        log.info("task finished", task_id=row.id, user=user)
        TASK_OPERATION_TOTAL.labels(operation="finish", outcome="finished").inc()

        await self._notifier.notify()
        return TaskResult(TASK_FINISHED, changed=True)

    async def delete_task(self, user: str, task_id: str | int | None = None) -> TaskResult:
        """Delete by id, or the user's latest unfinished task when no usable id is given"""
        task_id = parse_task_id(task_id)
        if task_id is None:
            row = await self._store.find_open(user)
        else:
            row = await self._store.get(task_id)

        if row is None:
            TASK_OPERATION_TOTAL.labels(operation="delete", outcome="not_found").inc()
            return TaskResult(TASK_NOT_FOUND)

        if row.user != user and not self.is_admin(user):
            log.warning("task delete refused", task_id=row.id, owner=row.user, user=user)
            TASK_OPERATION_TOTAL.labels(operation="delete", outcome="unauthorized").inc()
            return TaskResult(DELETE_UNAUTHORIZED)

        deleted_id = row.id
        await self._store.delete(row)
        log.info("task deleted", task_id=deleted_id, user=user)
        TASK_OPERATION_TOTAL.labels(operation="delete", outcome="deleted").inc()

        await self._notifier.notify()
        return TaskResult(TASK_REMOVED, changed=True)

    async def reset_all(self, user: str) -> TaskResult:
        if not self.is_admin(user):
            log.warning("task reset refused", user=user)
            TASK_OPERATION_TOTAL.labels(operation="reset", outcome="forbidden").inc()
            return TaskResult(RESET_FORBIDDEN)

        count = await self._store.delete_all()
        log.info("all tasks reset", deleted=count, user=user)
        TASK_OPERATION_TOTAL.labels(operation="reset", outcome="reset").inc()

        await self._notifier.notify()
        return TaskResult(TASKS_RESET, changed=True)
