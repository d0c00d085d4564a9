"""Tests for the caller's notification inbox."""

import pytest

from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import NotFound
from src.siteline.repositories import NotificationRepository
from src.siteline.services.notification_service import NotificationService
from tests.factories import NotificationFactory, ProfileFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def caller():
    return ProfileFactory.worker()


@pytest.fixture
def service(session, caller) -> NotificationService:
    return NotificationService(DataScope(session, viewer_id=caller.id))


def test_inbox_is_scoped_to_caller(service, caller):
    assert service.notification_repo.viewer_id == caller.id


async def test_list_returns_unread_count(stub, service, caller):
    notifications = NotificationFactory.batch(3, user_id=caller.id)
    stub(NotificationRepository, "list_for_user", return_value=notifications)
    stub(NotificationRepository, "count_unread", return_value=2)

    assert await service.list_for_user(caller.id) == (notifications, 2)


async def test_mark_read(session, stub, service, caller):
    notification = NotificationFactory.build(user_id=caller.id)
    stub(NotificationRepository, "get_by_id", return_value=notification)

    assert (await service.mark_read(notification.id)).read is True
    session.commit.assert_awaited_once()


async def test_someone_elses_notification_is_not_found(session, stub, service):
    stub(NotificationRepository, "get_by_id", return_value=None)

    with pytest.raises(NotFound, match="Notification not found"):
        await service.mark_read(ProfileFactory.worker().id)

    session.rollback.assert_awaited_once()


async def test_mark_all_read_returns_count(session, stub, service, caller):
    stub(NotificationRepository, "mark_all_read", return_value=4)

    assert await service.mark_all_read(caller.id) == 4
    session.commit.assert_awaited_once()


async def test_delete(session, stub, service, caller):
    notification = NotificationFactory.build(user_id=caller.id)
    stub(NotificationRepository, "get_by_id", return_value=notification)
    delete = stub(NotificationRepository, "delete")

    await service.delete(notification.id)

    delete.assert_awaited_once_with(notification)
