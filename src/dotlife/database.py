"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


class Database:
    """Engine plus session factory, owned by the application lifespan."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        engine_kwargs: dict[str, object] = {"echo": echo, "pool_pre_ping": True}
        if url.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=20,
                max_overflow=10,
                connect_args={"statement_cache_size": 0},
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session bound to this engine."""
        async with self.session_factory() as session:
            yield session

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Get the Database handle attached to the running app."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        msg = "Database not initialized. Start the app through its lifespan first."
        raise RuntimeError(msg)
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session (FastAPI dependency)."""
    database = get_database(request)
    async with database.session_factory() as session:
        yield session
