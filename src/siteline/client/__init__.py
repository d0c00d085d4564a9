"""Async client for the Siteline API with a local state store."""

from src.siteline.client.api import ApiError, SitelineClient
from src.siteline.client.state import (
    AppState,
    AuthState,
    NotificationsState,
    ProjectsState,
    TasksState,
)
from src.siteline.client.store import AppStore

__all__ = [
    "ApiError",
    "AppState",
    "AppStore",
    "AuthState",
    "NotificationsState",
    "ProjectsState",
    "SitelineClient",
    "TasksState",
]
