"""HTTP-level fixtures: the real app with its dependencies overridden.

Routes, validation, error handlers and middlewares run for real; the
database session, caller identity and services are mocks.
"""

from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.siteline.api.dependencies import (
    get_auth_service,
    get_current_identity,
    get_current_profile,
    get_db_session,
    get_membership_service,
    get_notification_service,
    get_profile_service,
    get_project_service,
    get_task_service,
)
from src.siteline.core.db import DataScope
from src.siteline.main import create_app
from src.siteline.services.auth_service import AuthService
from src.siteline.services.identity_service import Identity
from src.siteline.services.membership_service import MembershipService
from src.siteline.services.notification_service import NotificationService
from src.siteline.services.profile_service import ProfileService
from src.siteline.services.project_service import ProjectService
from src.siteline.services.task_service import TaskService
from tests.factories import ProfileFactory, UserFactory


@pytest.fixture
def app(session) -> FastAPI:
    app = create_app()

    async def _session():
        yield session

    app.dependency_overrides[get_db_session] = _session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def caller():
    """Signed-in project manager."""
    return ProfileFactory.project_manager()


@pytest.fixture
def signed_in(app: FastAPI, session, caller):
    """Skip the identity gate: every request is made by ``caller``."""
    user = UserFactory.build(id=caller.id, email=caller.email)
    identity = Identity(user=user, scope=DataScope(session, viewer_id=user.id))
    app.dependency_overrides[get_current_identity] = lambda: identity
    app.dependency_overrides[get_current_profile] = lambda: caller
    return caller


@pytest.fixture
def project_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=ProjectService)
    app.dependency_overrides[get_project_service] = lambda: service
    return service


@pytest.fixture
def membership_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=MembershipService)
    app.dependency_overrides[get_membership_service] = lambda: service
    return service


@pytest.fixture
def task_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=TaskService)
    app.dependency_overrides[get_task_service] = lambda: service
    return service


@pytest.fixture
def auth_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=AuthService)
    app.dependency_overrides[get_auth_service] = lambda: service
    return service


@pytest.fixture
def notification_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=NotificationService)
    app.dependency_overrides[get_notification_service] = lambda: service
    return service


@pytest.fixture
def profile_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=ProfileService)
    app.dependency_overrides[get_profile_service] = lambda: service
    return service
