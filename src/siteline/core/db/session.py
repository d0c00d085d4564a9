"""Database session management and caller-scoped data access."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.siteline.core.db.engine import get_engine


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        engine: Optional engine override for testing.

    Yields:
        AsyncSession with expire_on_commit disabled so hydrated objects
        survive the commit that precedes the response.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@dataclass(frozen=True)
class DataScope:
    """A session plus the identity whose visibility rules apply to reads.

    Repositories built from a scoped handle (``viewer_id`` set) only return
    rows the viewer may see. ``elevated()`` drops the viewer and must only be
    used after the authorization policy approved the action.
    """

    session: AsyncSession
    viewer_id: UUID | None = None

    @property
    def is_elevated(self) -> bool:
        return self.viewer_id is None

    def elevated(self) -> "DataScope":
        return replace(self, viewer_id=None)
