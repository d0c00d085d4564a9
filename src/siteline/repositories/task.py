"""Repository for Task entity."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlmodel import select

from src.siteline.models import Project, Task, TaskStatus
from src.siteline.repositories.base import BaseRepository
from src.siteline.repositories.visibility import visible_project_ids


class TaskRepository(BaseRepository[Task]):
    """Tasks. A scoped viewer sees tasks of projects visible to them."""

    model = Task

    def _visible(self, query: Any) -> Any:
        if self.viewer_id is None:
            return query
        return query.where(Task.project_id.in_(visible_project_ids(self.viewer_id)))  # type: ignore[attr-defined]

    async def list_for_project(
        self,
        project_id: UUID,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: UUID | None = None,
    ) -> list[Task]:
        query = select(Task).where(Task.project_id == project_id)
        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)
        if assigned_to:
            query = query.where(Task.assigned_to == assigned_to)
        query = query.order_by(Task.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(self._visible(query))
        return list(result.scalars().all())

    async def list_due_between(self, start: date, end: date) -> list[tuple[Task, Project]]:
        """Assigned, unfinished tasks due in [start, end], with their project."""
        query = (
            select(Task, Project)
            .join(Project, Project.id == Task.project_id)  # type: ignore[arg-type]
            .where(
                Task.assigned_to.is_not(None),  # type: ignore[union-attr]
                Task.status != TaskStatus.COMPLETED.value,
                Task.due_date >= start,  # type: ignore[operator]
                Task.due_date <= end,  # type: ignore[operator]
            )
            .order_by(Task.due_date)  # type: ignore[arg-type]
        )
        result = await self.session.execute(self._visible(query))
        return [(task, project) for task, project in result.all()]
