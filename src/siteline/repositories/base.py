"""Base repository with common CRUD operations and viewer scoping."""

from typing import Any, Generic, Self, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.siteline.core.db import DataScope

LIKE_ESCAPE = "\\"


def contains_pattern(search: str) -> str:
    """``ILIKE`` pattern matching ``search`` literally anywhere in the column.

    Use with ``escape=LIKE_ESCAPE`` so typed ``%`` and ``_`` are not wildcards.
    """
    escaped = (
        search.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    is done in the service layer.

    A repository built with a ``viewer_id`` applies the row visibility rules
    of ``_visible`` to every read; without one it is elevated and sees
    everything.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession, viewer_id: UUID | None = None):
        self.session = session
        self.viewer_id = viewer_id

    @classmethod
    def from_scope(cls, scope: DataScope) -> Self:
        return cls(scope.session, scope.viewer_id)

    @property
    def is_elevated(self) -> bool:
        return self.viewer_id is None

    def elevated(self) -> Self:
        """Same session, no row filtering. Use only after the policy approved."""
        return type(self)(self.session)

    def _visible(self, query: Any) -> Any:
        """Restrict ``query`` to rows the viewer may read. Override per model."""
        return query

    async def get_by_id(self, id: UUID) -> ModelType | None:
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        result = await self.session.execute(self._visible(query))
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)
