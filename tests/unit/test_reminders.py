"""Tests for the deadline reminder activity."""

from contextlib import asynccontextmanager
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from temporalio.testing import ActivityEnvironment

from src.siteline.repositories import TaskRepository
from src.siteline.services.notification_service import DispatchResult
from src.siteline.temporal.activities.reminders import send_deadline_reminders
from tests.factories import ProfileFactory, ProjectFactory, TaskFactory

pytestmark = pytest.mark.unit

MODULE = "src.siteline.temporal.activities.reminders"


@pytest.fixture
def due_tasks(stub, session, monkeypatch):
    """Route the activity's session to the mock and return a setter for due rows."""

    @asynccontextmanager
    async def _session():
        yield session

    monkeypatch.setattr(f"{MODULE}.get_session", _session)
    monkeypatch.setattr(f"{MODULE}.NotificationDispatcher", MagicMock())

    def _set(rows):
        return stub(TaskRepository, "list_due_between", return_value=rows)

    return _set


@pytest.fixture
def dispatch(monkeypatch) -> AsyncMock:
    mock = AsyncMock(return_value=DispatchResult(notified=1))
    monkeypatch.setattr(f"{MODULE}.dispatch_safely", mock)
    return mock


async def test_reminds_each_assignee(due_tasks, dispatch):
    project = ProjectFactory.build(created_by=ProfileFactory.project_manager().id)
    assignee = ProfileFactory.worker()
    task = TaskFactory.build(
        project_id=project.id,
        assigned_to=assignee.id,
        due_date=date.today() + timedelta(days=2),
    )
    lookup = due_tasks([(task, project)])

    result = await ActivityEnvironment().run(send_deadline_reminders, 2)

    assert result == {"tasks": 1, "notified": 1}
    lookup.assert_awaited_once_with(date.today(), date.today() + timedelta(days=2))
    ((recipients, payload, _dispatcher), _) = dispatch.call_args
    assert recipients == [assignee.id]
    assert payload.type.value == "deadline_reminder"
    assert payload.message == "Pour level 3 slab is due in 2 days"
    assert payload.email_data["project_name"] == project.name


async def test_failed_dispatch_is_not_counted(due_tasks, dispatch):
    project = ProjectFactory.build(created_by=ProfileFactory.project_manager().id)
    tasks = [
        TaskFactory.build(
            project_id=project.id,
            assigned_to=ProfileFactory.worker().id,
            due_date=date.today(),
        )
        for _ in range(2)
    ]
    due_tasks([(t, project) for t in tasks])
    dispatch.side_effect = [None, DispatchResult(notified=1)]

    result = await ActivityEnvironment().run(send_deadline_reminders, 1)

    assert result == {"tasks": 2, "notified": 1}


async def test_nothing_due(due_tasks, dispatch):
    due_tasks([])

    result = await ActivityEnvironment().run(send_deadline_reminders, 2)

    assert result == {"tasks": 0, "notified": 0}
    dispatch.assert_not_awaited()
