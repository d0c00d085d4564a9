"""Shared enums for models."""

from enum import Enum


class ProfileRole(str, Enum):
    """Organisation-wide role carried on the profile."""

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    CONTRACTOR = "contractor"
    WORKER = "worker"


class MembershipRole(str, Enum):
    """Role of a user within one project."""

    OWNER = "owner"
    MANAGER = "manager"
    CONTRACTOR = "contractor"
    WORKER = "worker"
    VIEWER = "viewer"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationType(str, Enum):
    PROJECT_INVITE = "project_invite"
    TASK_ASSIGNED = "task_assigned"
    PROJECT_UPDATED = "project_updated"
    TASK_UPDATED = "task_updated"
    DEADLINE_REMINDER = "deadline_reminder"
