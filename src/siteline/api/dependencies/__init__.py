"""API dependencies.

Import from here: `from src.siteline.api.dependencies import CurrentProfile, DBSession`
"""

from src.siteline.api.dependencies.auth import (
    CurrentIdentity,
    CurrentProfile,
    get_current_identity,
    get_current_profile,
)
from src.siteline.api.dependencies.db import DBSession, get_db_session
from src.siteline.api.dependencies.services import (
    AuthServiceDep,
    InviteServiceDep,
    MembershipServiceDep,
    NotificationServiceDep,
    OutboxDep,
    ProfileServiceDep,
    ProjectServiceDep,
    RegistrationServiceDep,
    TaskServiceDep,
    get_auth_service,
    get_invite_service,
    get_membership_service,
    get_notification_service,
    get_outbox,
    get_profile_service,
    get_project_service,
    get_registration_service,
    get_task_service,
)

__all__ = [
    # Auth
    "CurrentIdentity",
    "CurrentProfile",
    "get_current_identity",
    "get_current_profile",
    # Database
    "DBSession",
    "get_db_session",
    # Services
    "AuthServiceDep",
    "InviteServiceDep",
    "MembershipServiceDep",
    "NotificationServiceDep",
    "OutboxDep",
    "ProfileServiceDep",
    "ProjectServiceDep",
    "RegistrationServiceDep",
    "TaskServiceDep",
    "get_auth_service",
    "get_invite_service",
    "get_membership_service",
    "get_notification_service",
    "get_outbox",
    "get_profile_service",
    "get_project_service",
    "get_registration_service",
    "get_task_service",
]
