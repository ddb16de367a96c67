from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from attendance_tracker.config import Settings
from attendance_tracker.exceptions import StoreUnavailable
from attendance_tracker.models import Base
from attendance_tracker.utils.logging import get_logger

logger = get_logger(__name__)


class AttendanceStore:
    """Connection pool plus session factory for the attendance table.

    Built once per process by the app lifespan and handed to request
    handlers through ``get_db``. The engine owns connection lifetime;
    a handler only borrows one for the duration of its session.
    """

    def __init__(self, settings: Settings):
        self.target = settings.safe_database_target
        # echo=True will log generated SQL to the console (useful for debugging)
        self.engine = create_async_engine(
            settings.database_url,
            echo=settings.DEBUG,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,  # Handles lost connections gracefully
        )
        # expire_on_commit=False is CRITICAL for async usage.
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def bootstrap(self) -> None:
        """Create the attendance table if it does not exist yet."""
        async with self.engine.begin() as conn:
            logger.info("Connected to database successfully (%s)", self.target)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Attendance table verified/created")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar_one() == 1

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_store(request: Request) -> AttendanceStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailable()
    return store


# Dependency Injection for FastAPI
# This yields a session for each request and closes it automatically after.
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    store = get_store(request)
    async with store.session() as session:
        yield session
