"""Tests for notification emails (src/siteline/core/notifications/email.py)."""

import pytest
import resend

from src.siteline.core.config import get_settings
from src.siteline.core.notifications import (
    has_email_template,
    send_invite_email,
    send_notification_email,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def sent_emails(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    """Capture what would go to Resend, with an API key configured."""
    settings = get_settings().model_copy(update={"resend_api_key": "re_test_key"})
    monkeypatch.setattr("src.siteline.core.notifications.email.get_settings", lambda: settings)
    sent: list[dict] = []
    monkeypatch.setattr(resend.Emails, "send", lambda params: sent.append(params))
    return sent


@pytest.mark.parametrize(
    "template", ["project_invite", "task_assigned", "project_update", "deadline_reminder"]
)
def test_known_templates(template):
    assert has_email_template(template)


def test_task_updates_have_no_email_template():
    assert not has_email_template("task_updated")
    assert not has_email_template(None)


def test_unknown_template_raises():
    with pytest.raises(KeyError):
        send_notification_email("crew@example.com", "weekly_digest", {})


def test_without_api_key_email_is_logged_not_sent():
    assert get_settings().resend_api_key is None
    assert send_notification_email("crew@example.com", "project_invite", {}) is True


def test_sends_rendered_template(sent_emails):
    ok = send_notification_email(
        "crew@example.com",
        "task_assigned",
        {
            "user_name": "Sam",
            "task_title": "Pour slab",
            "project_name": "Depot",
            "task_link": "http://localhost:3000/projects/p/tasks?task=t",
        },
    )

    assert ok is True
    (params,) = sent_emails
    assert params["to"] == ["crew@example.com"]
    assert params["subject"] == "New task: Pour slab"
    assert "Hi Sam," in params["html"]
    assert "http://localhost:3000/projects/p/tasks?task=t" in params["html"]


def test_user_supplied_text_is_escaped(sent_emails):
    send_notification_email(
        "crew@example.com",
        "project_update",
        {"user_name": "<script>x</script>", "project_name": "Depot", "update_message": "ok"},
    )
    html = sent_emails[0]["html"]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_provider_error_returns_false(monkeypatch, sent_emails):
    def fail(params):
        raise RuntimeError("resend unavailable")

    monkeypatch.setattr(resend.Emails, "send", fail)
    assert send_notification_email("crew@example.com", "project_invite", {}) is False


def test_invite_email_contains_accept_link(sent_emails):
    assert send_invite_email("new@example.com", "tok123", "New Person", "Pat Manager") is True
    html = sent_emails[0]["html"]
    assert "/accept-invite?token=tok123" in html
    assert "Pat Manager" in html
