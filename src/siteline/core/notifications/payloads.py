"""Notification payloads and the builders for each mutation event."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from src.siteline.core.config import get_settings
from src.siteline.models.enums import NotificationType


@dataclass(frozen=True)
class NotificationPayload:
    """What to tell recipients. ``email_template`` None means in-app and push only."""

    type: NotificationType
    title: str
    message: str
    link: str | None = None
    project_id: UUID | None = None
    task_id: UUID | None = None
    email_template: str | None = None
    email_data: dict[str, Any] = field(default_factory=dict)


def project_link(project_id: UUID) -> str:
    return f"/projects/{project_id}"


def task_link(project_id: UUID, task_id: UUID) -> str:
    return f"/projects/{project_id}/tasks?task={task_id}"


def _absolute(path: str) -> str:
    return f"{get_settings().app_url}{path}"


def project_invite(project_id: UUID, project_name: str, inviter_name: str) -> NotificationPayload:
    link = project_link(project_id)
    return NotificationPayload(
        type=NotificationType.PROJECT_INVITE,
        title="Project Invitation",
        message=f"{inviter_name} invited you to {project_name}",
        link=link,
        project_id=project_id,
        email_template="project_invite",
        email_data={
            "project_name": project_name,
            "inviter_name": inviter_name,
            "project_link": _absolute(link),
        },
    )


def task_assigned(
    project_id: UUID,
    project_name: str,
    task_id: UUID,
    task_title: str,
    *,
    description: str | None = None,
    due_date: date | None = None,
    priority: str | None = None,
) -> NotificationPayload:
    link = task_link(project_id, task_id)
    return NotificationPayload(
        type=NotificationType.TASK_ASSIGNED,
        title="New Task Assigned",
        message=f"You've been assigned: {task_title}",
        link=link,
        project_id=project_id,
        task_id=task_id,
        email_template="task_assigned",
        email_data={
            "task_title": task_title,
            "task_description": description or "No description provided",
            "project_name": project_name,
            "due_date": due_date.isoformat() if due_date else "No due date",
            "priority": priority or "medium",
            "task_link": _absolute(link),
        },
    )


def project_updated(
    project_id: UUID, project_name: str, update_message: str, update_type: str = "general"
) -> NotificationPayload:
    link = project_link(project_id)
    return NotificationPayload(
        type=NotificationType.PROJECT_UPDATED,
        title="Project Update",
        message=f"{project_name}: {update_message}",
        link=link,
        project_id=project_id,
        email_template="project_update",
        email_data={
            "project_name": project_name,
            "update_type": update_type,
            "update_message": update_message,
            "project_link": _absolute(link),
        },
    )


def task_updated(
    project_id: UUID, task_id: UUID, task_title: str, update_message: str
) -> NotificationPayload:
    return NotificationPayload(
        type=NotificationType.TASK_UPDATED,
        title="Task Updated",
        message=f"{task_title}: {update_message}",
        link=task_link(project_id, task_id),
        project_id=project_id,
        task_id=task_id,
    )


def deadline_reminder(
    project_id: UUID,
    project_name: str,
    task_id: UUID,
    task_title: str,
    due_date: date,
    days_remaining: int,
) -> NotificationPayload:
    link = task_link(project_id, task_id)
    return NotificationPayload(
        type=NotificationType.DEADLINE_REMINDER,
        title="Task Deadline Reminder",
        message=f"{task_title} is due in {days_remaining} days",
        link=link,
        project_id=project_id,
        task_id=task_id,
        email_template="deadline_reminder",
        email_data={
            "task_title": task_title,
            "project_name": project_name,
            "due_date": due_date.isoformat(),
            "days_remaining": days_remaining,
            "task_link": _absolute(link),
        },
    )
