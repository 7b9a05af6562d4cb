from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.settings import Settings


class Database:
    """
    Owns the async engine (and its bounded connection pool) plus the session
    factory. One instance per process, built by the DI container.
    """

    def __init__(self, url: URL | str, **engine_kwargs: Any) -> None:
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
            class_=AsyncSession,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        connect_args: dict[str, Any] = {}
        if settings.DB_SSL:
            connect_args["ssl"] = True
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,             # hard cap: requests wait for a free connection
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        from app.v1_0.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.container.database()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session: AsyncSession = get_database(request).session()
    try:
        yield session
    finally:
        await session.close()
