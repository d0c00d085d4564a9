"""Local copies of server resources, one slice per resource family.

Resources are kept as the JSON dicts the API returns.
"""

from dataclasses import dataclass, field
from typing import Any

Resource = dict[str, Any]


@dataclass
class AuthState:
    user: Resource | None = None
    profile: Resource | None = None
    session: Resource | None = None
    loading: bool = False
    error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None


@dataclass
class ProjectsState:
    projects: list[Resource] = field(default_factory=list)
    current_project: Resource | None = None
    total: int = 0
    loading: bool = False
    error: str | None = None


@dataclass
class TasksState:
    tasks: list[Resource] = field(default_factory=list)
    project_id: str | None = None
    loading: bool = False
    error: str | None = None


@dataclass
class NotificationsState:
    notifications: list[Resource] = field(default_factory=list)
    unread_count: int = 0
    loading: bool = False
    error: str | None = None


@dataclass
class AppState:
    """Everything the client holds for one signed-in session."""

    auth: AuthState = field(default_factory=AuthState)
    projects: ProjectsState = field(default_factory=ProjectsState)
    tasks: TasksState = field(default_factory=TasksState)
    notifications: NotificationsState = field(default_factory=NotificationsState)
