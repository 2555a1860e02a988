"""
Task list fan-out to stream subscribers

- SubscriberRegistry: one bounded asyncio.Queue per open stream connection
- TaskNotifier: re-reads the full task list after a mutation and publishes it

Snapshots supersede each other, so when a reader falls behind its oldest
pending snapshot is dropped instead of blocking the publisher.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.observability.metrics import SNAPSHOT_PUSH_TOTAL, STREAM_SUBSCRIBERS
from taskboard.tasks.store import TaskStore

log = structlog.get_logger()

Snapshot = list[dict]


class SubscriberRegistry:
    """Open stream connections waiting for snapshots"""

    def __init__(self, queue_size: int = 16):
        self._queue_size = queue_size
        self._subscribers: list[asyncio.Queue[Snapshot]] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[Snapshot]:
        queue: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.append(queue)
        STREAM_SUBSCRIBERS.inc()
        return queue

    def unsubscribe(self, queue: asyncio.Queue[Snapshot]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            STREAM_SUBSCRIBERS.dec()

    def publish(self, snapshot: Snapshot) -> int:
        """Hand the snapshot to every subscriber without waiting; returns how many got it"""
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()  # stale
            queue.put_nowait(snapshot)
        SNAPSHOT_PUSH_TOTAL.inc(len(self._subscribers))
        return len(self._subscribers)


class TaskNotifier:
    """Reads the current task list and pushes it to the registry"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: SubscriberRegistry,
    ):
        self._session_factory = session_factory
        self._registry = registry

    async def snapshot(self) -> Snapshot:
        """Full task list in insertion order"""
        async with self._session_factory() as db:
            rows = await TaskStore(db).list_all()
        return [row.to_dict() for row in rows]

    async def notify(self) -> Snapshot:
        snapshot = await self.snapshot()
        delivered = self._registry.publish(snapshot)
        log.info("task snapshot pushed", tasks=len(snapshot), subscribers=delivered)
        return snapshot
