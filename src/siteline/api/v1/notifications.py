"""In-app notification inbox endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.siteline.api.dependencies import CurrentIdentity, NotificationServiceDep
from src.siteline.schemas.common import MessageResponse
from src.siteline.schemas.notification import (
    NotificationListResponse,
    NotificationRead,
    NotificationResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def list_notifications(
    identity: CurrentIdentity,
    service: NotificationServiceDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> NotificationListResponse:
    notifications, unread = await service.list_for_user(identity.user_id, limit=limit)
    return NotificationListResponse(
        notifications=[NotificationRead.model_validate(n) for n in notifications],
        unread_count=unread,
    )


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark notification read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(
    notification_id: UUID, _identity: CurrentIdentity, service: NotificationServiceDep
) -> NotificationResponse:
    notification = await service.mark_read(notification_id)
    return NotificationResponse(notification=NotificationRead.model_validate(notification))


@router.post("/read-all", response_model=MessageResponse, summary="Mark all notifications read")
async def mark_all_read(
    identity: CurrentIdentity, service: NotificationServiceDep
) -> MessageResponse:
    count = await service.mark_all_read(identity.user_id)
    return MessageResponse(message=f"{count} notifications marked as read")


@router.delete(
    "/{notification_id}",
    response_model=MessageResponse,
    summary="Delete notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(
    notification_id: UUID, _identity: CurrentIdentity, service: NotificationServiceDep
) -> MessageResponse:
    await service.delete(notification_id)
    return MessageResponse(message="Notification deleted")
