"""Repository for Notification entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select

from src.siteline.models import Notification
from src.siteline.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Notifications. A scoped viewer only ever sees their own."""

    model = Notification

    def _visible(self, query: Any) -> Any:
        if self.viewer_id is None:
            return query
        return query.where(Notification.user_id == self.viewer_id)

    def add_many(self, notifications: list[Notification]) -> None:
        self.session.add_all(notifications)

    async def list_for_user(self, user_id: UUID, limit: int = 50) -> list[Notification]:
        query = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.execute(self._visible(query))
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        query = select(func.count()).where(
            Notification.user_id == user_id,
            Notification.read == False,  # noqa: E712
        )
        return int(await self.session.scalar(self._visible(query)) or 0)

    async def mark_all_read(self, user_id: UUID) -> int:
        stmt = update(Notification).where(
            Notification.user_id == user_id,  # type: ignore[arg-type]
            Notification.read == False,  # type: ignore[arg-type]  # noqa: E712
        )
        if self.viewer_id is not None:
            stmt = stmt.where(Notification.user_id == self.viewer_id)  # type: ignore[arg-type]
        result = await self.session.execute(stmt.values(read=True))
        return result.rowcount or 0  # type: ignore[attr-defined]
