"""Service factory dependencies."""

from typing import Annotated

from fastapi import BackgroundTasks, Depends

from src.siteline.api.dependencies.auth import CurrentIdentity
from src.siteline.api.dependencies.db import DBSession
from src.siteline.repositories import (
    InviteTokenRepository,
    ProfileRepository,
    RefreshTokenRepository,
    UserRepository,
)
from src.siteline.services.auth_service import AuthService
from src.siteline.services.invite_service import InviteService
from src.siteline.services.membership_service import MembershipService
from src.siteline.services.notification_service import NotificationOutbox, NotificationService
from src.siteline.services.profile_service import ProfileService
from src.siteline.services.project_service import ProjectService
from src.siteline.services.registration_service import RegistrationService
from src.siteline.services.task_service import TaskService


def get_outbox(background_tasks: BackgroundTasks) -> NotificationOutbox:
    """Notifications queued here are delivered after the response is sent."""
    return NotificationOutbox(background_tasks)


OutboxDep = Annotated[NotificationOutbox, Depends(get_outbox)]


def get_auth_service(session: DBSession) -> AuthService:
    return AuthService(
        UserRepository(session),
        ProfileRepository(session),
        RefreshTokenRepository(session),
        session,
    )


def get_registration_service(session: DBSession) -> RegistrationService:
    return RegistrationService(UserRepository(session), ProfileRepository(session), session)


def get_invite_service(session: DBSession) -> InviteService:
    return InviteService(
        UserRepository(session),
        ProfileRepository(session),
        InviteTokenRepository(session),
        RefreshTokenRepository(session),
        session,
    )


def get_profile_service(identity: CurrentIdentity) -> ProfileService:
    session = identity.scope.session
    return ProfileService(ProfileRepository(session), session)


def get_project_service(identity: CurrentIdentity, outbox: OutboxDep) -> ProjectService:
    return ProjectService(identity.scope, outbox)


def get_membership_service(identity: CurrentIdentity, outbox: OutboxDep) -> MembershipService:
    return MembershipService(identity.scope, outbox)


def get_task_service(identity: CurrentIdentity, outbox: OutboxDep) -> TaskService:
    return TaskService(identity.scope, outbox)


def get_notification_service(identity: CurrentIdentity) -> NotificationService:
    return NotificationService(identity.scope)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
InviteServiceDep = Annotated[InviteService, Depends(get_invite_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
MembershipServiceDep = Annotated[MembershipService, Depends(get_membership_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
