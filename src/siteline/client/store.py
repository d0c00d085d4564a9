"""Client-side store that mirrors server resources.

Mutations are pessimistic: the request goes out first and the returned
resource is merged on success (prepend on create, replace by id on update,
filter out on delete). ``move_task`` is the one optimistic action. On any
failure the slice's ``error`` is set, nothing else changes, and the
``ApiError`` is re-raised for the caller to display.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from src.siteline.client.api import ApiError, SitelineClient
from src.siteline.client.state import AppState, Resource
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)


def _same_id(resource: Resource | None, resource_id: UUID | str) -> bool:
    return resource is not None and str(resource.get("id")) == str(resource_id)


def _replace_by_id(items: list[Resource], updated: Resource) -> list[Resource]:
    return [updated if _same_id(item, updated["id"]) else item for item in items]


def _without_id(items: list[Resource], resource_id: UUID | str) -> list[Resource]:
    return [item for item in items if not _same_id(item, resource_id)]


class AppStore:
    """Actions over an ``AppState``, backed by a ``SitelineClient``.

    Usage::

        store = AppStore(SitelineClient("https://api.example.com"))
        await store.login("pm@example.com", "secret")
        await store.fetch_projects()
        ...
        await store.close()
    """

    def __init__(self, client: SitelineClient, state: AppState | None = None):
        self.client = client
        self.state = state or AppState()

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "AppStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @asynccontextmanager
    async def _action(
        self, slice_: Any, name: str, track_loading: bool = False
    ) -> AsyncIterator[None]:
        slice_.error = None
        if track_loading:
            slice_.loading = True
        try:
            yield
        except ApiError as e:
            slice_.error = e.detail
            logger.info("store_action_failed", action=name, status_code=e.status_code)
            raise
        finally:
            if track_loading:
                slice_.loading = False

    # Auth

    async def login(self, email: str, password: str) -> Resource:
        auth = self.state.auth
        async with self._action(auth, "login", track_loading=True):
            data = await self.client.login(email, password)
        auth.user = data["user"]
        auth.profile = data["profile"]
        auth.session = data["session"]
        self.client.access_token = data["session"]["access_token"]
        return data

    async def signup(self, **fields: Any) -> Resource:
        auth = self.state.auth
        async with self._action(auth, "signup", track_loading=True):
            data = await self.client.signup(**fields)
        auth.user = data["user"]
        auth.profile = data["profile"]
        return data

    async def refresh_session(self) -> Resource:
        auth = self.state.auth
        if not auth.session:
            raise ApiError(401, "Not authenticated")
        async with self._action(auth, "refresh_session"):
            data = await self.client.refresh(auth.session["refresh_token"])
        auth.session = data["session"]
        self.client.access_token = data["session"]["access_token"]
        return data["session"]

    async def logout(self) -> None:
        """Revoke the refresh token and drop all local state."""
        auth = self.state.auth
        if auth.session:
            async with self._action(auth, "logout"):
                await self.client.logout(auth.session["refresh_token"])
        self.state = AppState()
        self.client.access_token = None

    async def update_profile(self, **fields: Any) -> Resource:
        auth = self.state.auth
        async with self._action(auth, "update_profile"):
            data = await self.client.update_me(**fields)
        auth.profile = data["profile"]
        return data["profile"]

    # Projects

    async def fetch_projects(self, **filters: Any) -> list[Resource]:
        projects = self.state.projects
        async with self._action(projects, "fetch_projects", track_loading=True):
            data = await self.client.list_projects(**filters)
        projects.projects = data["projects"]
        projects.total = data["total"]
        return projects.projects

    async def fetch_project(self, project_id: UUID | str) -> Resource:
        projects = self.state.projects
        async with self._action(projects, "fetch_project", track_loading=True):
            data = await self.client.get_project(project_id)
        projects.current_project = data["project"]
        return data["project"]

    async def create_project(self, **fields: Any) -> Resource:
        projects = self.state.projects
        async with self._action(projects, "create_project"):
            data = await self.client.create_project(**fields)
        project = data["project"]
        projects.projects = [project, *projects.projects]
        projects.total += 1
        return project

    async def update_project(self, project_id: UUID | str, **changes: Any) -> Resource:
        projects = self.state.projects
        async with self._action(projects, "update_project"):
            data = await self.client.update_project(project_id, **changes)
        project = data["project"]
        projects.projects = _replace_by_id(projects.projects, project)
        if _same_id(projects.current_project, project["id"]):
            projects.current_project = project
        return project

    async def delete_project(self, project_id: UUID | str) -> None:
        projects = self.state.projects
        async with self._action(projects, "delete_project"):
            await self.client.delete_project(project_id)
        before = len(projects.projects)
        projects.projects = _without_id(projects.projects, project_id)
        projects.total = max(0, projects.total - (before - len(projects.projects)))
        if _same_id(projects.current_project, project_id):
            projects.current_project = None

    async def add_member(self, project_id: UUID | str, **fields: Any) -> Resource:
        projects = self.state.projects
        async with self._action(projects, "add_member"):
            data = await self.client.add_member(project_id, **fields)
        member = data["member"]
        current = projects.current_project
        if current is not None and _same_id(current, project_id):
            current["project_members"] = [*current.get("project_members", []), member]
        return member

    async def remove_member(self, project_id: UUID | str, member_id: UUID | str) -> None:
        projects = self.state.projects
        async with self._action(projects, "remove_member"):
            await self.client.remove_member(project_id, member_id)
        current = projects.current_project
        if current is not None and _same_id(current, project_id):
            current["project_members"] = _without_id(
                current.get("project_members", []), member_id
            )

    # Tasks

    async def fetch_tasks(self, project_id: UUID | str, **filters: Any) -> list[Resource]:
        tasks = self.state.tasks
        async with self._action(tasks, "fetch_tasks", track_loading=True):
            data = await self.client.list_tasks(project_id, **filters)
        tasks.tasks = data["tasks"]
        tasks.project_id = str(project_id)
        return tasks.tasks

    async def create_task(self, **fields: Any) -> Resource:
        tasks = self.state.tasks
        async with self._action(tasks, "create_task"):
            data = await self.client.create_task(**fields)
        task = data["task"]
        if tasks.project_id in (None, str(task.get("project_id"))):
            tasks.tasks = [task, *tasks.tasks]
        return task

    async def update_task(self, task_id: UUID | str, **changes: Any) -> Resource:
        tasks = self.state.tasks
        async with self._action(tasks, "update_task"):
            data = await self.client.update_task(task_id, **changes)
        task = data["task"]
        tasks.tasks = _replace_by_id(tasks.tasks, task)
        return task

    async def delete_task(self, task_id: UUID | str) -> None:
        tasks = self.state.tasks
        async with self._action(tasks, "delete_task"):
            await self.client.delete_task(task_id)
        tasks.tasks = _without_id(tasks.tasks, task_id)

    async def move_task(self, task_id: UUID | str, new_status: str) -> Resource:
        """Board drag-and-drop: show the new column at once, then persist.

        The local status is not reverted if the update fails; the error is
        left on the tasks slice and the caller is expected to refetch.
        """
        tasks = self.state.tasks
        tasks.tasks = [
            {**task, "status": new_status} if _same_id(task, task_id) else task
            for task in tasks.tasks
        ]
        return await self.update_task(task_id, status=new_status)

    # Notifications

    async def fetch_notifications(self) -> list[Resource]:
        notifications = self.state.notifications
        async with self._action(notifications, "fetch_notifications", track_loading=True):
            data = await self.client.list_notifications()
        notifications.notifications = data["notifications"]
        notifications.unread_count = data["unread_count"]
        return notifications.notifications

    async def mark_read(self, notification_id: UUID | str) -> Resource:
        notifications = self.state.notifications
        async with self._action(notifications, "mark_read"):
            data = await self.client.mark_notification_read(notification_id)
        updated = data["notification"]
        was_unread = any(
            _same_id(n, notification_id) and not n.get("read")
            for n in notifications.notifications
        )
        notifications.notifications = _replace_by_id(notifications.notifications, updated)
        if was_unread:
            notifications.unread_count = max(0, notifications.unread_count - 1)
        return updated

    async def mark_all_read(self) -> None:
        notifications = self.state.notifications
        async with self._action(notifications, "mark_all_read"):
            await self.client.mark_all_notifications_read()
        notifications.notifications = [{**n, "read": True} for n in notifications.notifications]
        notifications.unread_count = 0

    async def delete_notification(self, notification_id: UUID | str) -> None:
        notifications = self.state.notifications
        async with self._action(notifications, "delete_notification"):
            await self.client.delete_notification(notification_id)
        was_unread = any(
            _same_id(n, notification_id) and not n.get("read")
            for n in notifications.notifications
        )
        notifications.notifications = _without_id(notifications.notifications, notification_id)
        if was_unread:
            notifications.unread_count = max(0, notifications.unread_count - 1)

    def receive_notification(self, notification: Resource) -> None:
        """Merge a notification pushed to this client outside a request."""
        notifications = self.state.notifications
        if any(_same_id(n, notification["id"]) for n in notifications.notifications):
            return
        notifications.notifications = [notification, *notifications.notifications]
        if not notification.get("read"):
            notifications.unread_count += 1
