"""Integration test fixtures for database and HTTP client operations.

These fixtures require a PostgreSQL database at ``DATABASE_URL``. When it
cannot be reached the integration tests are skipped.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from uuid import UUID

import pytest
from alembic import command
from alembic.config import Config
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.siteline.core import db
from src.siteline.core import redis as redis_core
from src.siteline.core.config import get_settings
from src.siteline.core.security import create_access_token
from src.siteline.main import create_app
from src.siteline.models import Profile, ProfileRole
from tests.factories import ProfileFactory, UserFactory

MakeProfile = Callable[..., Awaitable[Profile]]

# Test profiles never receive push or email
QUIET_PREFERENCES = {"push": False, "email": False}


def run_migrations_sync() -> None:
    command.upgrade(Config("alembic.ini"), "head")


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Redis clients are bound to the event loop of the test that created them."""
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    await asyncio.to_thread(run_migrations_sync)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit. Tests must call ``await session.commit()``
    to persist changes.
    """
    async with db.get_session(engine) as session:
        yield session


@pytest.fixture
async def make_profile(
    engine: AsyncEngine, db_session: AsyncSession
) -> AsyncGenerator[MakeProfile]:
    """Create committed users with profiles. Everything they created is removed afterwards."""
    created: list[UUID] = []

    async def _make(role: ProfileRole = ProfileRole.WORKER, **kwargs) -> Profile:
        user = UserFactory.build()
        profile = ProfileFactory.build(
            id=user.id,
            email=user.email,
            role=role.value,
            notification_preferences=dict(QUIET_PREFERENCES),
            **kwargs,
        )
        db_session.add(user)
        await db_session.flush()
        db_session.add(profile)
        await db_session.commit()
        created.append(user.id)
        return profile

    yield _make

    if created:
        async with engine.connect() as conn:
            # Projects reference their creator without a cascade
            await conn.execute(
                text("DELETE FROM projects WHERE created_by = ANY(:ids)"), {"ids": created}
            )
            await conn.execute(text("DELETE FROM users WHERE id = ANY(:ids)"), {"ids": created})
            await conn.commit()


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the real app and database."""
    await db.dispose_engine()

    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await db.dispose_engine()


@pytest.fixture
def auth_headers() -> Callable[[Profile], dict[str, str]]:
    """Bearer header for a profile's user."""

    def _headers(profile: Profile) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(profile.id)}"}

    return _headers
