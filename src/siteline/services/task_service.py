"""Task mutations and reads."""

from uuid import UUID

from src.siteline.core.authorization import (
    can_create_task,
    can_delete_task,
    can_update_task,
    require,
)
from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import InvalidAssignment, NotFound, ValidationError
from src.siteline.core.logging import get_logger
from src.siteline.core.notifications import payloads
from src.siteline.models import MembershipRole, Profile, Project, Task, TaskStatus
from src.siteline.models.base import utc_now
from src.siteline.repositories import (
    MemberRepository,
    ProfileRepository,
    ProjectRepository,
    TaskRepository,
)
from src.siteline.schemas.profile import ProfileSummary
from src.siteline.schemas.task import TaskCreate, TaskRead, TaskUpdate
from src.siteline.services.base import rollback_on_error
from src.siteline.services.notification_service import NotificationOutbox
from src.siteline.services.project_service import PROJECT_NOT_FOUND

logger = get_logger(__name__)

TASK_NOT_FOUND = "Task not found"
STATUS_WATCHERS = (MembershipRole.OWNER.value, MembershipRole.MANAGER.value)


class TaskService:
    """Task CRUD. A task the caller cannot see is reported as not found."""

    def __init__(self, scope: DataScope, outbox: NotificationOutbox | None = None):
        self.scope = scope
        self.session = scope.session
        self.outbox = outbox or NotificationOutbox()
        self.member_repo = MemberRepository(self.session)
        self.profile_repo = ProfileRepository(self.session)

    def _scope_for(self, caller: Profile) -> DataScope:
        return self.scope.elevated() if caller.is_admin else self.scope

    async def _get_visible_project(self, caller: Profile, project_id: UUID) -> Project:
        project = await ProjectRepository.from_scope(self._scope_for(caller)).get_by_id(project_id)
        if project is None:
            raise NotFound(PROJECT_NOT_FOUND)
        return project

    async def _get_visible_task(self, caller: Profile, task_id: UUID) -> Task:
        task = await TaskRepository.from_scope(self._scope_for(caller)).get_by_id(task_id)
        if task is None:
            raise NotFound(TASK_NOT_FOUND)
        return task

    async def _caller_role(self, project_id: UUID, caller: Profile) -> str | None:
        membership = await self.member_repo.get_membership(project_id, caller.id)
        return membership.role if membership else None

    async def _check_assignee(self, project_id: UUID, user_id: UUID) -> None:
        if await self.member_repo.get_membership(project_id, user_id) is None:
            raise InvalidAssignment()

    async def _check_dependency(
        self, project_id: UUID, depends_on: UUID, task_id: UUID | None
    ) -> None:
        if depends_on == task_id:
            raise ValidationError("A task cannot depend on itself")
        dependency = await TaskRepository(self.session).get_by_id(depends_on)
        if dependency is None or dependency.project_id != project_id:
            raise ValidationError("Dependency must be a task in the same project")

    async def hydrate(self, tasks: list[Task]) -> list[TaskRead]:
        """Attach assignee and creator profiles."""
        profiles = await self.profile_repo.get_many(
            [t.assigned_to for t in tasks] + [t.created_by for t in tasks]
        )

        def summary(profile_id: UUID | None) -> ProfileSummary | None:
            profile = profiles.get(profile_id) if profile_id else None
            return ProfileSummary.model_validate(profile) if profile else None

        return [
            TaskRead.model_validate(t).model_copy(
                update={
                    "assigned_to_profile": summary(t.assigned_to),
                    "created_by_profile": summary(t.created_by),
                }
            )
            for t in tasks
        ]

    async def list_tasks(
        self,
        caller: Profile,
        project_id: UUID,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: UUID | None = None,
    ) -> list[TaskRead]:
        await self._get_visible_project(caller, project_id)
        tasks = await TaskRepository.from_scope(self._scope_for(caller)).list_for_project(
            project_id, status=status, priority=priority, assigned_to=assigned_to
        )
        return await self.hydrate(tasks)

    async def create_task(self, caller: Profile, data: TaskCreate) -> TaskRead:
        """Create a task. The assignee, if not the caller, is notified.

        Raises:
            NotFound: Project not visible to the caller.
            Forbidden: Caller is not admin, owner, manager or contractor.
            InvalidAssignment: Assignee is not a project member.
        """
        async with rollback_on_error(self.session, "create task"):
            project = await self._get_visible_project(caller, data.project_id)
            require(can_create_task(caller.role, await self._caller_role(project.id, caller)))

            if data.assigned_to is not None:
                await self._check_assignee(project.id, data.assigned_to)
            if data.depends_on is not None:
                await self._check_dependency(project.id, data.depends_on, None)

            task = Task(
                project_id=project.id,
                title=data.title,
                description=data.description,
                status=data.status.value,
                priority=data.priority.value,
                assigned_to=data.assigned_to,
                due_date=data.due_date,
                estimated_hours=data.estimated_hours,
                depends_on=data.depends_on,
                location=data.location,
                created_by=caller.id,
            )
            if task.status == TaskStatus.COMPLETED.value:
                task.completed_at = utc_now()
            TaskRepository(self.session).add(task)
            await self.session.commit()
            await self.session.refresh(task)

        logger.info("Task created", task_id=str(task.id), project_id=str(project.id))

        if task.assigned_to is not None and task.assigned_to != caller.id:
            self.outbox.enqueue([task.assigned_to], self._assigned_payload(project, task))

        (read,) = await self.hydrate([task])
        return read

    async def update_task(self, caller: Profile, task_id: UUID, data: TaskUpdate) -> TaskRead:
        """Apply the sanitized update.

        Moving into completed stamps ``completed_at`` the first time. A status
        change notifies the project's owners and managers other than the
        caller; a new assignee other than the caller gets an assignment.

        Raises:
            NotFound: Task not visible to the caller.
            Forbidden: Caller is not admin, assignee, owner or manager.
            InvalidAssignment: New assignee is not a project member.
        """
        async with rollback_on_error(self.session, "update task"):
            task = await self._get_visible_task(caller, task_id)
            caller_role = await self._caller_role(task.project_id, caller)
            require(can_update_task(caller.role, caller_role, task.assigned_to == caller.id))

            changes = data.changes()
            new_assignee = changes.get("assigned_to")
            if new_assignee is not None and new_assignee != task.assigned_to:
                await self._check_assignee(task.project_id, new_assignee)
            if changes.get("depends_on") is not None:
                await self._check_dependency(task.project_id, changes["depends_on"], task.id)

            previous_status = task.status
            previous_assignee = task.assigned_to
            for field, value in changes.items():
                setattr(task, field, value)
            if task.status == TaskStatus.COMPLETED.value and task.completed_at is None:
                task.completed_at = utc_now()
            task.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(task)

        logger.info("Task updated", task_id=str(task.id), fields=sorted(changes))

        project = await ProjectRepository(self.session).get_by_id(task.project_id)
        if project is not None:
            if task.status != previous_status:
                watchers = await self.member_repo.user_ids(project.id, roles=STATUS_WATCHERS)
                self.outbox.enqueue(
                    (w for w in watchers if w != caller.id),
                    payloads.task_updated(
                        project.id, task.id, task.title, f"Task status changed to {task.status}"
                    ),
                )
            if task.assigned_to not in (None, previous_assignee, caller.id):
                self.outbox.enqueue([task.assigned_to], self._assigned_payload(project, task))

        (read,) = await self.hydrate([task])
        return read

    async def delete_task(self, caller: Profile, task_id: UUID) -> None:
        """Raises NotFound if invisible, Forbidden unless admin, owner or manager."""
        async with rollback_on_error(self.session, "delete task"):
            task = await self._get_visible_task(caller, task_id)
            require(can_delete_task(caller.role, await self._caller_role(task.project_id, caller)))
            await TaskRepository(self.session).delete(task)
            await self.session.commit()

        logger.info("Task deleted", task_id=str(task_id))

    @staticmethod
    def _assigned_payload(project: Project, task: Task) -> payloads.NotificationPayload:
        return payloads.task_assigned(
            project.id,
            project.name,
            task.id,
            task.title,
            description=task.description,
            due_date=task.due_date,
            priority=task.priority,
        )
