"""Repository for ProjectMember entity."""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlmodel import select

from src.siteline.models import Profile, ProjectMember
from src.siteline.repositories.base import BaseRepository
from src.siteline.repositories.visibility import visible_project_ids


class MemberRepository(BaseRepository[ProjectMember]):
    """Memberships. A scoped viewer sees members of projects visible to them."""

    model = ProjectMember

    def _visible(self, query: Any) -> Any:
        if self.viewer_id is None:
            return query
        return query.where(
            ProjectMember.project_id.in_(visible_project_ids(self.viewer_id))  # type: ignore[attr-defined]
        )

    async def get_membership(self, project_id: UUID, user_id: UUID) -> ProjectMember | None:
        query = select(ProjectMember).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
        result = await self.session.execute(self._visible(query))
        return result.scalar_one_or_none()

    async def get_in_project(self, member_id: UUID, project_id: UUID) -> ProjectMember | None:
        query = select(ProjectMember).where(
            ProjectMember.id == member_id,
            ProjectMember.project_id == project_id,
        )
        result = await self.session.execute(self._visible(query))
        return result.scalar_one_or_none()

    async def list_with_profiles(self, project_id: UUID) -> list[tuple[ProjectMember, Profile]]:
        query = (
            select(ProjectMember, Profile)
            .join(Profile, Profile.id == ProjectMember.user_id)  # type: ignore[arg-type]
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.assigned_at)  # type: ignore[arg-type]
        )
        result = await self.session.execute(self._visible(query))
        return [(member, profile) for member, profile in result.all()]

    async def user_ids(
        self, project_id: UUID, roles: Iterable[str] | None = None
    ) -> list[UUID]:
        """User ids of the project's members, optionally restricted to some roles."""
        query = select(ProjectMember.user_id).where(ProjectMember.project_id == project_id)
        if roles is not None:
            query = query.where(ProjectMember.role.in_(list(roles)))  # type: ignore[attr-defined]
        result = await self.session.execute(self._visible(query))
        return list(result.scalars().all())

    async def roles_for_user(
        self, user_id: UUID, project_ids: list[UUID]
    ) -> dict[UUID, str]:
        if not project_ids:
            return {}
        result = await self.session.execute(
            select(ProjectMember.project_id, ProjectMember.role).where(
                ProjectMember.user_id == user_id,
                ProjectMember.project_id.in_(project_ids),  # type: ignore[attr-defined]
            )
        )
        return {project_id: role for project_id, role in result.all()}
