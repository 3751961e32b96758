import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Optional local overrides for the test database
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

if os.environ.get("TEST_DATABASE_URL"):
    os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]

# MUST be set before libs that cache settings are imported
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-admin-signing-key-" + "x" * 32)
os.environ.setdefault("USER_JWT_SECRET", "test-user-signing-key-" + "y" * 32)
os.environ.setdefault("SENDGRID_API_KEY", "")
os.environ.setdefault("GEMINI_API_KEY", "")
# Use litellm's bundled model cost map instead of fetching it over the network
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402
from services.storefront_service import models as _storefront_models  # noqa: E402,F401
from services.storefront_service.app.main import app  # noqa: E402

# Clear cached settings to reload with the test env vars
get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Engine for the test database. Tests that need it are skipped when no
    database is configured or reachable.
    """
    if not settings.DATABASE_URL:
        pytest.skip("DATABASE_URL / TEST_DATABASE_URL not set")

    # Tests run on the host even when .env points at the compose network
    db_url = settings.DATABASE_URL.replace("host.docker.internal", "localhost")
    engine = create_async_engine(db_url, future=True)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OperationalError, OSError):
        await engine.dispose()
        pytest.skip("Database not available for tests")

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session that rolls back after the test.

    join_transaction_mode="create_savepoint" lets code under test commit and
    roll back freely while everything stays inside the outer transaction.
    """
    connection = await test_engine.connect()
    transaction = await connection.begin()

    session_factory = async_sessionmaker(
        bind=connection,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    session = session_factory()

    try:
        yield session
    finally:
        await session.close()
        await transaction.rollback()
        await connection.close()


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app with the DB dependency overridden."""
    from libs.db.session import get_async_db

    async def _override_db():
        yield db_session

    app.dependency_overrides[get_async_db] = _override_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def app_client() -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient without a database, for routes that never touch it."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
