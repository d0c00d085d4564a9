"""Project mutations and reads."""

from uuid import UUID

from src.siteline.core.authorization import (
    can_create_project,
    can_delete_project,
    can_update_project,
    require,
)
from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import NotFound
from src.siteline.core.logging import get_logger
from src.siteline.core.notifications import payloads
from src.siteline.models import MembershipRole, Profile, Project, ProjectMember
from src.siteline.models.base import utc_now
from src.siteline.repositories import MemberRepository, ProfileRepository, ProjectRepository
from src.siteline.schemas.profile import ProfileSummary
from src.siteline.schemas.project import (
    MemberRead,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectSummary,
    ProjectUpdate,
)
from src.siteline.services.base import rollback_on_error
from src.siteline.services.notification_service import NotificationOutbox

logger = get_logger(__name__)

PROJECT_NOT_FOUND = "Project not found"


def member_read(member: ProjectMember, profile: Profile | None) -> MemberRead:
    return MemberRead.model_validate(member).model_copy(
        update={"profile": ProfileSummary.model_validate(profile) if profile else None}
    )


class ProjectService:
    """Every call takes the caller's resolved profile.

    Reads go through repositories scoped to the caller, except for admins
    who see every project. Writes happen only after the policy approved.
    """

    def __init__(self, scope: DataScope, outbox: NotificationOutbox | None = None):
        self.scope = scope
        self.session = scope.session
        self.outbox = outbox or NotificationOutbox()

    def _scope_for(self, caller: Profile) -> DataScope:
        return self.scope.elevated() if caller.is_admin else self.scope

    async def _get_visible(self, caller: Profile, project_id: UUID) -> Project:
        project = await ProjectRepository.from_scope(self._scope_for(caller)).get_by_id(project_id)
        if project is None:
            raise NotFound(PROJECT_NOT_FOUND)
        return project

    async def _membership_role(self, project_id: UUID, user_id: UUID) -> str | None:
        membership = await MemberRepository(self.session).get_membership(project_id, user_id)
        return membership.role if membership else None

    async def hydrate(self, project: Project) -> ProjectDetail:
        """Project with its creator's profile and the member list."""
        members = await MemberRepository(self.session).list_with_profiles(project.id)
        creator = await ProfileRepository(self.session).get_by_id(project.created_by)
        return ProjectDetail(
            **ProjectRead.model_validate(project).model_dump(),
            created_by_profile=ProfileSummary.model_validate(creator) if creator else None,
            project_members=[member_read(m, p) for m, p in members],
        )

    async def list_projects(
        self,
        caller: Profile,
        status: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[ProjectSummary], int]:
        """Projects visible to the caller, newest first. Returns (page, total)."""
        repo = ProjectRepository.from_scope(self._scope_for(caller))
        projects, total = await repo.list_projects(
            status=status, search=search, limit=limit, offset=offset
        )
        ids = [p.id for p in projects]
        counts = await repo.member_counts(ids)
        roles = await MemberRepository(self.session).roles_for_user(caller.id, ids)
        summaries = [
            ProjectSummary(
                **ProjectRead.model_validate(p).model_dump(),
                member_count=counts.get(p.id, 0),
                user_role=roles.get(p.id),
            )
            for p in projects
        ]
        return summaries, total

    async def get_project(self, caller: Profile, project_id: UUID) -> ProjectDetail:
        return await self.hydrate(await self._get_visible(caller, project_id))

    async def create_project(self, caller: Profile, data: ProjectCreate) -> ProjectDetail:
        """Create a project and make the caller its owner, atomically.

        Raises:
            Forbidden: Caller is neither admin nor project manager.
        """
        require(can_create_project(caller.role))

        async with rollback_on_error(self.session, "create project"):
            project = Project(
                name=data.name,
                description=data.description,
                location=data.location,
                address=data.address,
                budget=data.budget,
                start_date=data.start_date,
                estimated_end_date=data.estimated_end_date,
                actual_end_date=data.actual_end_date,
                status=data.status.value,
                created_by=caller.id,
            )
            ProjectRepository(self.session).add(project)
            MemberRepository(self.session).add(
                ProjectMember(
                    project_id=project.id,
                    user_id=caller.id,
                    role=MembershipRole.OWNER.value,
                    assigned_by=caller.id,
                )
            )
            await self.session.commit()
            await self.session.refresh(project)

        logger.info("Project created", project_id=str(project.id))
        return await self.hydrate(project)

    async def update_project(
        self, caller: Profile, project_id: UUID, data: ProjectUpdate
    ) -> ProjectDetail:
        """Apply a partial update. A status change notifies the other members.

        Raises:
            NotFound: Project not visible to the caller.
            Forbidden: Caller is not admin, creator, owner or manager.
        """
        async with rollback_on_error(self.session, "update project"):
            project = await self._get_visible(caller, project_id)
            membership_role = await self._membership_role(project.id, caller.id)
            require(
                can_update_project(caller.role, membership_role, project.created_by == caller.id)
            )

            changes = data.changes()
            previous_status = project.status
            for field, value in changes.items():
                setattr(project, field, value)
            project.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(project)

        logger.info("Project updated", project_id=str(project.id), fields=sorted(changes))

        if project.status != previous_status:
            recipients = await MemberRepository(self.session).user_ids(project.id)
            self.outbox.enqueue(
                (r for r in recipients if r != caller.id),
                payloads.project_updated(
                    project.id,
                    project.name,
                    f"Project status changed to {project.status}",
                    update_type="status_change",
                ),
            )
        return await self.hydrate(project)

    async def delete_project(self, caller: Profile, project_id: UUID) -> None:
        """Delete the project with its tasks and members.

        Raises:
            NotFound: Project not visible to the caller.
            Forbidden: Caller is neither admin nor the creator.
        """
        async with rollback_on_error(self.session, "delete project"):
            project = await self._get_visible(caller, project_id)
            require(can_delete_project(caller.role, project.created_by == caller.id))
            await ProjectRepository(self.session).delete_cascade(project)
            await self.session.commit()

        logger.info("Project deleted", project_id=str(project_id))
