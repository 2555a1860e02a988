"""
Service context: process-wide state built once per application

Holds the engine, session factory, subscriber registry, notifier and the access
settings. It hangs off app.state and reaches handlers through Depends.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from taskboard.config import Settings
from taskboard.db.engine import build_engine, build_session_factory
from taskboard.tasks import SubscriberRegistry, TaskNotifier, TaskService


@dataclass
class ServiceContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    registry: SubscriberRegistry
    notifier: TaskNotifier

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContext":
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)
        registry = SubscriberRegistry(queue_size=settings.SUBSCRIBER_QUEUE_SIZE)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            registry=registry,
            notifier=TaskNotifier(session_factory, registry),
        )

    @property
    def api_key(self) -> str | None:
        return self.settings.API_KEY

    @property
    def admin_user(self) -> str:
        return self.settings.ADMIN_USER

    def task_service(self, db: AsyncSession) -> TaskService:
        return TaskService(db, self.notifier, self.admin_user)


def get_context(request: Request) -> ServiceContext:
    """FastAPI dependency: the application's ServiceContext"""
    return request.app.state.context


async def get_db(context: ServiceContext = Depends(get_context)) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one database session per request"""
    async with context.session_factory() as session:
        yield session
