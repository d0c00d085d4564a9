"""Web push delivery through the Pusher Beams publish API."""

from typing import Any

import httpx

from src.siteline.core.config import get_settings
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)

# Beams rejects publishes addressed to more than this many users
MAX_USERS_PER_PUBLISH = 1000


class BeamsPushClient:
    """Minimal async client for Beams ``publishes/users``.

    Users are addressed by their Siteline user id, which the frontend
    registers with Beams after sign-in.
    """

    def __init__(
        self,
        instance_id: str,
        secret_key: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.instance_id = instance_id
        self._secret_key = secret_key
        self._timeout = timeout
        self._transport = transport

    @property
    def publish_url(self) -> str:
        return (
            f"https://{self.instance_id}.pushnotifications.pusher.com"
            f"/publish_api/v1/instances/{self.instance_id}/publishes/users"
        )

    async def publish_to_users(
        self,
        user_ids: list[str],
        title: str,
        body: str,
        deep_link: str,
        data: dict[str, Any] | None = None,
    ) -> int:
        """Publish one web notification. Returns how many users were addressed.

        Raises httpx.HTTPError when Beams rejects or cannot be reached.
        """
        if not user_ids:
            return 0

        settings = get_settings()
        notification = {
            "title": title,
            "body": body,
            "icon": f"{settings.app_url}{settings.push_icon_path}",
            "deep_link": f"{settings.app_url}{deep_link}",
        }
        headers = {"Authorization": f"Bearer {self._secret_key}"}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for start in range(0, len(user_ids), MAX_USERS_PER_PUBLISH):
                chunk = user_ids[start : start + MAX_USERS_PER_PUBLISH]
                response = await client.post(
                    self.publish_url,
                    headers=headers,
                    json={
                        "users": chunk,
                        "web": {"notification": notification, "data": data or {}},
                    },
                )
                response.raise_for_status()
                logger.info(
                    "Push published",
                    recipients=len(chunk),
                    publish_id=response.json().get("publishId"),
                )
        return len(user_ids)


def get_push_client() -> BeamsPushClient | None:
    """Client from settings, or None when Pusher credentials are not configured."""
    settings = get_settings()
    if not settings.push_enabled:
        return None
    return BeamsPushClient(
        settings.pusher_instance_id,  # type: ignore[arg-type]
        settings.pusher_secret_key,  # type: ignore[arg-type]
        timeout=settings.push_timeout_seconds,
    )
