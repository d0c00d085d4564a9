"""Deadline reminder activity."""

from datetime import date, timedelta

from temporalio import activity

from src.siteline.core.db import get_session
from src.siteline.core.notifications import payloads
from src.siteline.repositories import TaskRepository
from src.siteline.services.notification_service import NotificationDispatcher, dispatch_safely


@activity.defn
async def send_deadline_reminders(days_ahead: int) -> dict[str, int]:
    """
    Remind assignees of unfinished tasks due within ``days_ahead`` days.

    Not idempotent: every run notifies again, so the workflow runs this
    activity at most once per schedule tick.

    Returns:
        {"tasks": tasks found, "notified": tasks whose dispatch completed}
    """
    today = date.today()
    async with get_session() as session:
        due = await TaskRepository(session).list_due_between(
            today, today + timedelta(days=days_ahead)
        )

    activity.logger.info(f"Found {len(due)} tasks due within {days_ahead} days")

    dispatcher = NotificationDispatcher()
    notified = 0
    for task, project in due:
        if task.assigned_to is None or task.due_date is None:
            continue
        payload = payloads.deadline_reminder(
            project.id,
            project.name,
            task.id,
            task.title,
            task.due_date,
            (task.due_date - today).days,
        )
        result = await dispatch_safely([task.assigned_to], payload, dispatcher)
        if result is not None:
            notified += 1

    activity.logger.info(f"Sent deadline reminders for {notified} tasks")
    return {"tasks": len(due), "notified": notified}
