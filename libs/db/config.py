from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import Settings


def create_engine(settings: Settings, url: Optional[str] = None) -> AsyncEngine:
    """
    Build the async engine. echo=True for local dev to see SQL queries.
    """
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=(settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG"),
        future=True,
        pool_pre_ping=True,  # Test connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


class Database:
    """Owns the engine and session factory for one application instance.

    Built during app startup and stored on ``app.state.database``.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if not settings.DATABASE_URL:
            raise RuntimeError("DATABASE_URL is not configured")
        return cls(create_engine(settings))

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()
