from src.siteline.schemas.auth import (
    AcceptInviteRequest,
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RefreshResponse,
    SessionRead,
    SignupRequest,
    SignupResponse,
    UserRead,
)
from src.siteline.schemas.common import MessageResponse
from src.siteline.schemas.notification import (
    NotificationListResponse,
    NotificationRead,
    NotificationResponse,
)
from src.siteline.schemas.profile import (
    InviteUserRequest,
    InviteUserResponse,
    ProfileListResponse,
    ProfileRead,
    ProfileResponse,
    ProfileSummary,
    ProfileUpdate,
)
from src.siteline.schemas.project import (
    MemberAdd,
    MemberRead,
    MemberResponse,
    ProjectCreate,
    ProjectDetail,
    ProjectListResponse,
    ProjectRead,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
)
from src.siteline.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    # Auth
    "AcceptInviteRequest",
    "AuthResponse",
    "LoginRequest",
    "LogoutRequest",
    "RefreshRequest",
    "RefreshResponse",
    "SessionRead",
    "SignupRequest",
    "SignupResponse",
    "UserRead",
    # Common
    "MessageResponse",
    # Notification
    "NotificationListResponse",
    "NotificationRead",
    "NotificationResponse",
    # Profile
    "InviteUserRequest",
    "InviteUserResponse",
    "ProfileListResponse",
    "ProfileRead",
    "ProfileResponse",
    "ProfileSummary",
    "ProfileUpdate",
    # Project
    "MemberAdd",
    "MemberRead",
    "MemberResponse",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectListResponse",
    "ProjectRead",
    "ProjectResponse",
    "ProjectSummary",
    "ProjectUpdate",
    # Task
    "TaskCreate",
    "TaskListResponse",
    "TaskRead",
    "TaskResponse",
    "TaskUpdate",
]
