"""Project membership mutations."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.siteline.core.authorization import can_manage_members, can_remove_member, require
from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import AlreadyMember, CannotRemoveOwner, NotFound
from src.siteline.core.logging import get_logger
from src.siteline.core.notifications import payloads
from src.siteline.models import MembershipRole, Profile, Project, ProjectMember
from src.siteline.repositories import MemberRepository, ProfileRepository, ProjectRepository
from src.siteline.schemas.project import MemberAdd, MemberRead
from src.siteline.services.base import rollback_on_error
from src.siteline.services.notification_service import NotificationOutbox
from src.siteline.services.project_service import PROJECT_NOT_FOUND, member_read

logger = get_logger(__name__)


class MembershipService:
    def __init__(self, scope: DataScope, outbox: NotificationOutbox | None = None):
        self.scope = scope
        self.session = scope.session
        self.outbox = outbox or NotificationOutbox()
        # Membership rows are looked up unfiltered once the project itself was visible
        self.member_repo = MemberRepository(self.session)
        self.profile_repo = ProfileRepository(self.session)

    async def _get_visible_project(self, caller: Profile, project_id: UUID) -> Project:
        scope = self.scope.elevated() if caller.is_admin else self.scope
        project = await ProjectRepository.from_scope(scope).get_by_id(project_id)
        if project is None:
            raise NotFound(PROJECT_NOT_FOUND)
        return project

    async def _caller_role(self, project_id: UUID, caller: Profile) -> str | None:
        membership = await self.member_repo.get_membership(project_id, caller.id)
        return membership.role if membership else None

    async def _find_target(self, data: MemberAdd) -> Profile:
        if data.user_id is not None:
            profile = await self.profile_repo.get_by_id(data.user_id)
            if profile is None:
                raise NotFound("User not found")
            return profile
        profile = await self.profile_repo.get_by_email(str(data.email))
        if profile is None:
            raise NotFound("User not found with that email")
        return profile

    async def add_member(self, caller: Profile, project_id: UUID, data: MemberAdd) -> MemberRead:
        """Add a profile to the project. The new member gets a project invite.

        Raises:
            NotFound: Project not visible, or no profile for the email/user id.
            Forbidden: Caller cannot manage members.
            AlreadyMember: The profile is already on the project.
        """
        async with rollback_on_error(self.session, "add project member"):
            project = await self._get_visible_project(caller, project_id)
            require(can_manage_members(caller.role, await self._caller_role(project.id, caller)))

            target = await self._find_target(data)
            if await self.member_repo.get_membership(project.id, target.id) is not None:
                raise AlreadyMember()

            member = ProjectMember(
                project_id=project.id,
                user_id=target.id,
                role=data.role.value,
                assigned_by=caller.id,
            )
            self.member_repo.add(member)
            try:
                await self.session.commit()
            except IntegrityError as e:
                # Concurrent add won the unique constraint
                raise AlreadyMember() from e
            await self.session.refresh(member)

        logger.info(
            "Project member added",
            project_id=str(project.id),
            member_user_id=str(target.id),
            role=member.role,
        )
        self.outbox.enqueue(
            [target.id], payloads.project_invite(project.id, project.name, caller.full_name)
        )
        return member_read(member, target)

    async def remove_member(self, caller: Profile, project_id: UUID, member_id: UUID) -> None:
        """Remove a membership row. Owners can never be removed.

        Raises:
            NotFound: Project not visible, or member not in this project.
            CannotRemoveOwner: Target is the project owner.
            Forbidden: Caller cannot manage members.
        """
        async with rollback_on_error(self.session, "remove project member"):
            project = await self._get_visible_project(caller, project_id)
            member = await self.member_repo.get_in_project(member_id, project.id)
            if member is None:
                raise NotFound("Member not found")
            if member.role == MembershipRole.OWNER.value:
                raise CannotRemoveOwner()

            caller_role = await self._caller_role(project.id, caller)
            require(can_remove_member(caller.role, caller_role, member.role))

            await self.member_repo.delete(member)
            await self.session.commit()

        logger.info(
            "Project member removed",
            project_id=str(project_id),
            member_user_id=str(member.user_id),
        )
