"""Model exports.

Import from here: `from src.siteline.models import Project, Task`
"""

from src.siteline.models.auth import InviteToken, RefreshToken
from src.siteline.models.enums import (
    MembershipRole,
    NotificationType,
    ProfileRole,
    ProjectStatus,
    TaskPriority,
    TaskStatus,
)
from src.siteline.models.notification import Notification
from src.siteline.models.project import Project, ProjectMember
from src.siteline.models.task import Task
from src.siteline.models.user import Profile, User

__all__ = [
    # Enums
    "MembershipRole",
    "NotificationType",
    "ProfileRole",
    "ProjectStatus",
    "TaskPriority",
    "TaskStatus",
    # Models
    "InviteToken",
    "Notification",
    "Profile",
    "Project",
    "ProjectMember",
    "RefreshToken",
    "Task",
    "User",
]
