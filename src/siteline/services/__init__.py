from src.siteline.services.auth_service import AuthService, SignedIn
from src.siteline.services.identity_service import Identity, IdentityService
from src.siteline.services.invite_service import InviteService
from src.siteline.services.membership_service import MembershipService
from src.siteline.services.notification_service import (
    DispatchResult,
    NotificationDispatcher,
    NotificationOutbox,
    NotificationService,
    dispatch_safely,
)
from src.siteline.services.profile_service import ProfileService
from src.siteline.services.project_service import ProjectService
from src.siteline.services.registration_service import RegistrationService
from src.siteline.services.task_service import TaskService

__all__ = [
    "AuthService",
    "DispatchResult",
    "Identity",
    "IdentityService",
    "InviteService",
    "MembershipService",
    "NotificationDispatcher",
    "NotificationOutbox",
    "NotificationService",
    "ProfileService",
    "ProjectService",
    "RegistrationService",
    "SignedIn",
    "TaskService",
    "dispatch_safely",
]
