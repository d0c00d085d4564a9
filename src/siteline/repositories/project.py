"""Repository for Project entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlmodel import select

from src.siteline.models import Project, ProjectMember, Task
from src.siteline.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern
from src.siteline.repositories.visibility import visible_project_ids


class ProjectRepository(BaseRepository[Project]):
    """Projects. A scoped viewer sees the projects they created or belong to."""

    model = Project

    def _visible(self, query: Any) -> Any:
        if self.viewer_id is None:
            return query
        return query.where(Project.id.in_(visible_project_ids(self.viewer_id)))  # type: ignore[attr-defined]

    async def list_projects(
        self,
        status: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Project], int]:
        """Newest first, with optional status and name/location search.

        Returns (page, total matching rows).
        """
        query = self._visible(select(Project))
        if status:
            query = query.where(Project.status == status)
        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    Project.name.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                    Project.location.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        result = await self.session.execute(
            query.order_by(Project.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), int(total or 0)

    async def member_counts(self, project_ids: list[UUID]) -> dict[UUID, int]:
        if not project_ids:
            return {}
        result = await self.session.execute(
            select(ProjectMember.project_id, func.count())
            .where(ProjectMember.project_id.in_(project_ids))  # type: ignore[attr-defined]
            .group_by(ProjectMember.project_id)
        )
        return {project_id: count for project_id, count in result.all()}

    async def delete_cascade(self, project: Project) -> None:
        """Delete the project with the tasks and memberships it owns."""
        await self.session.execute(delete(Task).where(Task.project_id == project.id))  # type: ignore[arg-type]
        await self.session.execute(
            delete(ProjectMember).where(ProjectMember.project_id == project.id)  # type: ignore[arg-type]
        )
        await self.session.delete(project)
