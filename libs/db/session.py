from typing import AsyncGenerator

from fastapi import Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.error_handler import ApiError


async def get_async_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an async database session.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise ApiError(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Service temporarily unavailable",
            code="SERVICE_UNAVAILABLE",
        )

    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
