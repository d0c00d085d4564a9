"""Notification delivery sinks - email, push - and the payload builders."""

from src.siteline.core.notifications.batch import BatchOutcome, BestEffortBatch
from src.siteline.core.notifications.email import (
    has_email_template,
    send_invite_email,
    send_notification_email,
)
from src.siteline.core.notifications.payloads import NotificationPayload
from src.siteline.core.notifications.push import BeamsPushClient, get_push_client

__all__ = [
    "BatchOutcome",
    "BeamsPushClient",
    "BestEffortBatch",
    "NotificationPayload",
    "get_push_client",
    "has_email_template",
    "send_invite_email",
    "send_notification_email",
]
