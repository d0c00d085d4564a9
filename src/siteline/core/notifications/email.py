"""Email client using Resend API."""

import html
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

import resend

from src.siteline.core.config import get_settings
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_HEADING_STYLE = "color: #b45309; margin-bottom: 24px;"
_BUTTON_STYLE = (
    "background-color: #d97706; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"


def _deliver(to: str, subject: str, body: str, email_type: str) -> bool:
    """Send one email, bounded by EMAIL_SEND_TIMEOUT_SECONDS.

    Returns True if sent (or logged in dev mode), False on error. Never raises.
    """
    settings = get_settings()

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - email not sent", to=to, email_type=email_type)
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": subject,
                "html": body,
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Email sent", to=to, email_type=email_type)
        return True
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            to=to,
            email_type=email_type,
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send email", to=to, email_type=email_type, error=str(e))
        return False


def _layout(heading: str, paragraphs: list[str], button_label: str, url: str) -> str:
    body = "\n    ".join(f"<p>{p}</p>" for p in paragraphs)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="{_HEADING_STYLE}">{html.escape(heading)}</h1>
    {body}
    <p style="margin: 32px 0;">
        <a href="{html.escape(url)}" style="{_BUTTON_STYLE}">{html.escape(button_label)}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        You can change which emails you receive in your notification settings.
    </p>
</body>
</html>"""


def send_invite_email(to: str, token: str, full_name: str, inviter_name: str) -> bool:
    """Send the set-password link to a newly invited user."""
    settings = get_settings()
    url = f"{settings.app_url}/accept-invite?token={token}"
    body = _layout(
        f"Welcome to {settings.app_name}",
        [
            f"Hi {html.escape(full_name)},",
            f"{html.escape(inviter_name)} has invited you to join the team on "
            f"<strong>{html.escape(settings.app_name)}</strong>.",
            f"Set your password to get started. This link expires in "
            f"{settings.invite_expire_days} days.",
        ],
        "Set Password",
        url,
    )
    return _deliver(to, f"You've been invited to {settings.app_name}", body, "invite")


def _project_invite(data: dict[str, Any]) -> tuple[str, str]:
    project = html.escape(str(data.get("project_name", "")))
    inviter = html.escape(str(data.get("inviter_name", "A teammate")))
    return f"You've been added to {data.get('project_name', 'a project')}", _layout(
        "Project Invitation",
        [
            f"Hi {html.escape(str(data.get('user_name', '')))},",
            f"{inviter} added you to <strong>{project}</strong>.",
        ],
        "Open Project",
        str(data.get("project_link", "")),
    )


def _task_assigned(data: dict[str, Any]) -> tuple[str, str]:
    title = html.escape(str(data.get("task_title", "")))
    return f"New task: {data.get('task_title', '')}", _layout(
        "New Task Assigned",
        [
            f"Hi {html.escape(str(data.get('user_name', '')))},",
            f"You've been assigned <strong>{title}</strong> on "
            f"{html.escape(str(data.get('project_name', '')))}.",
            html.escape(str(data.get("task_description", ""))),
            f"Priority: {html.escape(str(data.get('priority', '')))} &middot; "
            f"Due: {html.escape(str(data.get('due_date', '')))}",
        ],
        "View Task",
        str(data.get("task_link", "")),
    )


def _project_update(data: dict[str, Any]) -> tuple[str, str]:
    project = html.escape(str(data.get("project_name", "")))
    return f"Update on {data.get('project_name', 'your project')}", _layout(
        "Project Update",
        [
            f"Hi {html.escape(str(data.get('user_name', '')))},",
            f"<strong>{project}</strong>: {html.escape(str(data.get('update_message', '')))}",
        ],
        "Open Project",
        str(data.get("project_link", "")),
    )


def _deadline_reminder(data: dict[str, Any]) -> tuple[str, str]:
    title = html.escape(str(data.get("task_title", "")))
    return f"Reminder: {data.get('task_title', '')} is due soon", _layout(
        "Task Deadline Reminder",
        [
            f"Hi {html.escape(str(data.get('user_name', '')))},",
            f"<strong>{title}</strong> on {html.escape(str(data.get('project_name', '')))} "
            f"is due on {html.escape(str(data.get('due_date', '')))} "
            f"({html.escape(str(data.get('days_remaining', '')))} days left).",
        ],
        "View Task",
        str(data.get("task_link", "")),
    )


_TEMPLATES: dict[str, Callable[[dict[str, Any]], tuple[str, str]]] = {
    "project_invite": _project_invite,
    "task_assigned": _task_assigned,
    "project_update": _project_update,
    "deadline_reminder": _deadline_reminder,
}


def has_email_template(template: str | None) -> bool:
    return template is not None and template in _TEMPLATES


def send_notification_email(to: str, template: str, data: dict[str, Any]) -> bool:
    """Render a notification template and send it.

    Raises KeyError for an unknown template; delivery errors return False.
    """
    subject, body = _TEMPLATES[template](data)
    return _deliver(to, subject, body, template)
