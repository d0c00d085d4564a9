"""Repository exports."""

from src.siteline.repositories.base import BaseRepository
from src.siteline.repositories.member import MemberRepository
from src.siteline.repositories.notification import NotificationRepository
from src.siteline.repositories.profile import ProfileRepository, UserRepository
from src.siteline.repositories.project import ProjectRepository
from src.siteline.repositories.task import TaskRepository
from src.siteline.repositories.token import InviteTokenRepository, RefreshTokenRepository

__all__ = [
    "BaseRepository",
    "InviteTokenRepository",
    "MemberRepository",
    "NotificationRepository",
    "ProfileRepository",
    "ProjectRepository",
    "RefreshTokenRepository",
    "TaskRepository",
    "UserRepository",
]
