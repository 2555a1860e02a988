# tests/test_notifier.py

from __future__ import annotations

import pytest

from taskboard.context import ServiceContext
from taskboard.tasks import SubscriberRegistry, TaskService


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe() -> None:
    registry = SubscriberRegistry()

    first = registry.subscribe()
    second = registry.subscribe()
    assert len(registry) == 2

    registry.unsubscribe(first)
    assert len(registry) == 1

    # unknown / already removed queues are ignored
    registry.unsubscribe(first)
    assert len(registry) == 1

    registry.unsubscribe(second)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_publish_reaches_every_subscriber() -> None:
    registry = SubscriberRegistry()
    queues = [registry.subscribe() for _ in range(3)]
    snapshot = [{"id": 1, "user": "u", "task": "t", "finished": False}]

    assert registry.publish(snapshot) == 3
    for queue in queues:
        assert queue.get_nowait() == snapshot


@pytest.mark.asyncio
async def test_publish_without_subscribers() -> None:
    assert SubscriberRegistry().publish([]) == 0


@pytest.mark.asyncio
async def test_slow_subscriber_keeps_latest_snapshot() -> None:
    registry = SubscriberRegistry(queue_size=1)
    slow = registry.subscribe()
    fast = registry.subscribe()

    registry.publish([{"id": 1}])
    assert fast.get_nowait() == [{"id": 1}]

    # slow never read the first one; it is replaced, and fast is unaffected
    registry.publish([{"id": 2}])

    assert slow.qsize() == 1
    assert slow.get_nowait() == [{"id": 2}]
    assert fast.get_nowait() == [{"id": 2}]


@pytest.mark.asyncio
async def test_closed_subscriber_stops_receiving() -> None:
    registry = SubscriberRegistry()
    gone = registry.subscribe()
    registry.unsubscribe(gone)

    registry.publish([{"id": 1}])

    assert gone.empty()


@pytest.mark.asyncio
async def test_snapshot_is_ordered_wire_shape(service: TaskService, context: ServiceContext) -> None:
    await service.create_task("b", "second user")
    await service.create_task("a", "third user")
    await service.finish_task("b")

    snapshot = await context.notifier.snapshot()

    assert [t["user"] for t in snapshot] == ["b", "a"]
    assert snapshot[0]["id"] < snapshot[1]["id"]
    assert set(snapshot[0]) == {"id", "user", "task", "finished"}
    assert snapshot[0]["finished"] is True


@pytest.mark.asyncio
async def test_notify_publishes_snapshot(context: ServiceContext) -> None:
    queue = context.registry.subscribe()

    snapshot = await context.notifier.notify()

    assert snapshot == []
    assert queue.get_nowait() == []
