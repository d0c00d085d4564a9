"""Notification fan-out and the in-app inbox.

Mutators never deliver notifications themselves. They hand events to a
``NotificationOutbox`` after their transaction commits; the outbox runs
``dispatch_safely`` as a FastAPI background task, after the response has
been sent. Delivery is best-effort and at-most-once:

- one in-app row per resolved recipient, written in the dispatcher's own session
- one push publish addressed to every recipient that has not opted out
- one email per recipient that has not opted out, each isolated from the others

No failure here reaches the request that caused the event.
"""

import asyncio
import functools
from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from src.siteline.core.db import DataScope, get_session
from src.siteline.core.exceptions import NotFound
from src.siteline.core.logging import get_logger
from src.siteline.core.notifications import (
    BeamsPushClient,
    BestEffortBatch,
    NotificationPayload,
    get_push_client,
    has_email_template,
    send_notification_email,
)
from src.siteline.models import Notification, Profile
from src.siteline.repositories import NotificationRepository, ProfileRepository
from src.siteline.services.base import rollback_on_error

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
EmailSender = Callable[[str, str, dict[str, Any]], bool]


@dataclass(frozen=True)
class DispatchResult:
    notified: int = 0
    push_sent: int = 0
    email_sent: int = 0
    email_failed: int = 0


class NotificationDispatcher:
    """Deliver one payload to a set of recipients over every channel."""

    def __init__(
        self,
        session_factory: SessionFactory = get_session,
        push_client: BeamsPushClient | None = None,
        email_sender: EmailSender = send_notification_email,
    ):
        self._session_factory = session_factory
        self._push_client = push_client
        self._email_sender = email_sender

    @property
    def push_client(self) -> BeamsPushClient | None:
        if self._push_client is None:
            self._push_client = get_push_client()
        return self._push_client

    async def dispatch(
        self, recipient_ids: Iterable[UUID], payload: NotificationPayload
    ) -> DispatchResult:
        """Fan ``payload`` out to ``recipient_ids``. Unknown ids are skipped.

        Each channel is attempted independently; one failing never stops the
        next. Raises only if the recipients cannot be resolved at all.
        """
        async with self._session_factory() as session:
            recipients = await ProfileRepository(session).get_many(recipient_ids)
            if not recipients:
                logger.info("No notification recipients", type=payload.type.value)
                return DispatchResult()
            notified = await self._store(session, list(recipients.values()), payload)

        push_sent = await self._push(list(recipients.values()), payload)
        email_sent, email_failed = await self._email(list(recipients.values()), payload)

        result = DispatchResult(
            notified=notified,
            push_sent=push_sent,
            email_sent=email_sent,
            email_failed=email_failed,
        )
        logger.info(
            "Notifications dispatched",
            type=payload.type.value,
            recipients=len(recipients),
            notified=result.notified,
            push_sent=result.push_sent,
            email_sent=result.email_sent,
            email_failed=result.email_failed,
        )
        return result

    async def _store(
        self, session: AsyncSession, recipients: list[Profile], payload: NotificationPayload
    ) -> int:
        rows = [
            Notification(
                user_id=profile.id,
                type=payload.type.value,
                title=payload.title,
                message=payload.message,
                link=payload.link,
                project_id=payload.project_id,
                task_id=payload.task_id,
            )
            for profile in recipients
        ]
        try:
            NotificationRepository(session).add_many(rows)
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error("Failed to store notifications", type=payload.type.value, error=str(e))
            return 0
        return len(rows)

    async def _push(self, recipients: list[Profile], payload: NotificationPayload) -> int:
        targets = [str(p.id) for p in recipients if p.wants("push")]
        client = self.push_client
        if not targets or client is None:
            return 0
        data = {
            "type": payload.type.value,
            "project_id": str(payload.project_id) if payload.project_id else None,
            "task_id": str(payload.task_id) if payload.task_id else None,
        }
        try:
            return await client.publish_to_users(
                targets, payload.title, payload.message, payload.link or "/", data=data
            )
        except Exception as e:
            logger.error("Push delivery failed", type=payload.type.value, error=str(e))
            return 0

    async def _email(
        self, recipients: list[Profile], payload: NotificationPayload
    ) -> tuple[int, int]:
        template = payload.email_template
        if not has_email_template(template):
            return 0, 0

        batch = BestEffortBatch(f"email:{template}")
        for profile in recipients:
            if not profile.wants("email"):
                continue
            data = {**payload.email_data, "user_name": profile.full_name}
            batch.add(
                str(profile.id),
                functools.partial(
                    asyncio.to_thread, self._email_sender, profile.email, template, data
                ),
            )
        if not len(batch):
            return 0, 0
        outcome = await batch.run()
        return len(outcome.succeeded), len(outcome.failed)


async def dispatch_safely(
    recipient_ids: list[UUID],
    payload: NotificationPayload,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult | None:
    """Run a dispatch, logging and absorbing every error."""
    try:
        return await (dispatcher or NotificationDispatcher()).dispatch(recipient_ids, payload)
    except Exception as e:
        logger.error(
            "Notification dispatch failed",
            type=payload.type.value,
            recipients=len(recipient_ids),
            error=str(e),
        )
        return None


class NotificationOutbox:
    """Hands committed events to background delivery.

    Without ``background_tasks`` (workers, scripts) events are kept in
    ``pending`` and delivered by ``flush``.
    """

    def __init__(
        self,
        background_tasks: BackgroundTasks | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self._background_tasks = background_tasks
        self._dispatcher = dispatcher
        self.pending: list[tuple[list[UUID], NotificationPayload]] = []

    def enqueue(self, recipient_ids: Iterable[UUID | None], payload: NotificationPayload) -> None:
        recipients = list(dict.fromkeys(r for r in recipient_ids if r is not None))
        if not recipients:
            return
        if self._background_tasks is not None:
            self._background_tasks.add_task(
                dispatch_safely, recipients, payload, self._dispatcher
            )
        else:
            self.pending.append((recipients, payload))

    async def flush(self) -> list[DispatchResult | None]:
        pending, self.pending = self.pending, []
        return [
            await dispatch_safely(recipients, payload, self._dispatcher)
            for recipients, payload in pending
        ]


class NotificationService:
    """The caller's own notification inbox."""

    def __init__(self, scope: DataScope):
        self.scope = scope
        self.session = scope.session
        self.notification_repo = NotificationRepository.from_scope(scope)

    async def list_for_user(
        self, user_id: UUID, limit: int = 50
    ) -> tuple[list[Notification], int]:
        """Newest first, with the unread count."""
        notifications = await self.notification_repo.list_for_user(user_id, limit=limit)
        unread = await self.notification_repo.count_unread(user_id)
        return notifications, unread

    async def _get_own(self, notification_id: UUID) -> Notification:
        notification = await self.notification_repo.get_by_id(notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        return notification

    async def mark_read(self, notification_id: UUID) -> Notification:
        async with rollback_on_error(self.session, "mark notification read"):
            notification = await self._get_own(notification_id)
            notification.read = True
            await self.session.commit()
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        async with rollback_on_error(self.session, "mark notifications read"):
            count = await self.notification_repo.mark_all_read(user_id)
            await self.session.commit()
        return count

    async def delete(self, notification_id: UUID) -> None:
        async with rollback_on_error(self.session, "delete notification"):
            notification = await self._get_own(notification_id)
            await self.notification_repo.delete(notification)
            await self.session.commit()
