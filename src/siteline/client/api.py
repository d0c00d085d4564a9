"""Thin async HTTP client over the ``/api/v1`` routes.

Every non-2xx response is raised as ``ApiError`` carrying the server's
``detail`` so callers can show it directly.
"""

from typing import Any
from uuid import UUID

import httpx

from src.siteline.core.logging import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: str, request_id: str | None = None):
        self.status_code = status_code
        self.detail = detail
        self.request_id = request_id
        super().__init__(f"{status_code}: {detail}")


def _error_from_response(response: httpx.Response) -> ApiError:
    detail: Any = response.reason_phrase or "Request failed"
    request_id = response.headers.get("X-Request-ID")
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or detail
        request_id = body.get("request_id") or request_id
    if not isinstance(detail, str):
        detail = str(detail)
    return ApiError(response.status_code, detail, request_id)


class SitelineClient:
    """One client per signed-in session. Holds the bearer token once set."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            timeout=httpx.Timeout(timeout, connect=5.0),
            transport=transport,
        )
        self.access_token: str | None = None

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SitelineClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        response = await self._http.request(
            method, path, json=json, params=params or None, headers=headers
        )
        if response.is_error:
            error = _error_from_response(response)
            logger.debug(
                "api_request_failed",
                method=method,
                path=path,
                status_code=error.status_code,
                detail=error.detail,
            )
            raise error
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self.request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def signup(self, **fields: Any) -> dict[str, Any]:
        return await self.request("POST", "/auth/signup", json=fields)

    async def refresh(self, refresh_token: str) -> dict[str, Any]:
        return await self.request("POST", "/auth/refresh", json={"refresh_token": refresh_token})

    async def logout(self, refresh_token: str) -> None:
        await self.request("POST", "/auth/logout", json={"refresh_token": refresh_token})

    # Profiles

    async def get_me(self) -> dict[str, Any]:
        return await self.request("GET", "/users/me")

    async def update_me(self, **fields: Any) -> dict[str, Any]:
        return await self.request("PATCH", "/users/me", json=fields)

    # Projects

    async def list_projects(self, **params: Any) -> dict[str, Any]:
        return await self.request("GET", "/projects", params=params)

    async def get_project(self, project_id: UUID | str) -> dict[str, Any]:
        return await self.request("GET", f"/projects/{project_id}")

    async def create_project(self, **fields: Any) -> dict[str, Any]:
        return await self.request("POST", "/projects", json=fields)

    async def update_project(self, project_id: UUID | str, **fields: Any) -> dict[str, Any]:
        return await self.request("PATCH", f"/projects/{project_id}", json=fields)

    async def delete_project(self, project_id: UUID | str) -> dict[str, Any]:
        return await self.request("DELETE", f"/projects/{project_id}")

    async def add_member(self, project_id: UUID | str, **fields: Any) -> dict[str, Any]:
        return await self.request("POST", f"/projects/{project_id}/members", json=fields)

    async def remove_member(self, project_id: UUID | str, member_id: UUID | str) -> dict[str, Any]:
        return await self.request("DELETE", f"/projects/{project_id}/members/{member_id}")

    # Tasks

    async def list_tasks(self, project_id: UUID | str, **params: Any) -> dict[str, Any]:
        return await self.request("GET", f"/projects/{project_id}/tasks", params=params)

    async def create_task(self, **fields: Any) -> dict[str, Any]:
        return await self.request("POST", "/tasks", json=fields)

    async def update_task(self, task_id: UUID | str, **fields: Any) -> dict[str, Any]:
        return await self.request("PATCH", f"/tasks/{task_id}", json=fields)

    async def delete_task(self, task_id: UUID | str) -> dict[str, Any]:
        return await self.request("DELETE", f"/tasks/{task_id}")

    # Notifications

    async def list_notifications(self) -> dict[str, Any]:
        return await self.request("GET", "/notifications")

    async def mark_notification_read(self, notification_id: UUID | str) -> dict[str, Any]:
        return await self.request("PATCH", f"/notifications/{notification_id}/read")

    async def mark_all_notifications_read(self) -> dict[str, Any]:
        return await self.request("POST", "/notifications/read-all")

    async def delete_notification(self, notification_id: UUID | str) -> dict[str, Any]:
        return await self.request("DELETE", f"/notifications/{notification_id}")
