"""
Task storage: CRUD over the tasks table through one AsyncSession
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.db.models import Task

MAX_TASK_ID = 2**63 - 1
MIN_TASK_ID = -(2**63)


class TaskStore:
    """Row-level access to tasks. Every write commits immediately."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def create(self, user: str, task: str) -> Task:
        row = Task(user=user, task=task, finished=False)
        self._db.add(row)
        await self._db.commit()
        return row

    async def get(self, task_id: int) -> Task | None:
        # ids are signed 64-bit; anything outside can't match a row and the driver rejects it
        if not MIN_TASK_ID <= task_id <= MAX_TASK_ID:
            return None
        return await self._db.get(Task, task_id)

    async def find_open(self, user: str) -> Task | None:
        """Most recently created unfinished task of this user"""
        result = await self._db.execute(
            select(Task)
            .where(Task.user == user, Task.finished.is_(False))
            .order_by(Task.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_all(self) -> list[Task]:
        result = await self._db.execute(select(Task).order_by(Task.id))
        return list(result.scalars().all())

    async def mark_finished(self, row: Task) -> None:
        row.finished = True
        await self._db.commit()

    async def delete(self, row: Task) -> None:
        await self._db.delete(row)
        await self._db.commit()

    async def delete_all(self) -> int:
        result = await self._db.execute(delete(Task))
        await self._db.commit()
        return result.rowcount
