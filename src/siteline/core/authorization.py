"""Authorization policy.

Every check is a pure function of the caller's profile role, their
membership role on the project (``None`` when they are not a member) and
ownership facts. Profile role ``admin`` satisfies any project-level check.
A missing membership is simply "no permission", never an error.
"""

from enum import Enum
from typing import TypeAlias

from src.siteline.core.exceptions import Forbidden
from src.siteline.models.enums import MembershipRole, ProfileRole

Role: TypeAlias = str | Enum | None

PROJECT_CREATORS = frozenset({ProfileRole.ADMIN.value, ProfileRole.PROJECT_MANAGER.value})
USER_INVITERS = PROJECT_CREATORS
PROJECT_EDITORS = frozenset({MembershipRole.OWNER.value, MembershipRole.MANAGER.value})
MEMBER_MANAGERS = PROJECT_EDITORS
TASK_CREATORS = frozenset(
    {MembershipRole.OWNER.value, MembershipRole.MANAGER.value, MembershipRole.CONTRACTOR.value}
)
TASK_EDITORS = PROJECT_EDITORS


def _value(role: Role) -> str | None:
    if isinstance(role, Enum):
        return str(role.value)
    return role


def is_admin(profile_role: Role) -> bool:
    return _value(profile_role) == ProfileRole.ADMIN.value


def _has_membership(membership_role: Role, allowed: frozenset[str]) -> bool:
    value = _value(membership_role)
    return value is not None and value in allowed


def can_create_project(profile_role: Role) -> bool:
    return _value(profile_role) in PROJECT_CREATORS


def can_update_project(profile_role: Role, membership_role: Role, is_creator: bool) -> bool:
    return (
        is_admin(profile_role)
        or is_creator
        or _has_membership(membership_role, PROJECT_EDITORS)
    )


def can_delete_project(profile_role: Role, is_creator: bool) -> bool:
    return is_admin(profile_role) or is_creator


def can_manage_members(profile_role: Role, membership_role: Role) -> bool:
    return is_admin(profile_role) or _has_membership(membership_role, MEMBER_MANAGERS)


def can_remove_member(profile_role: Role, membership_role: Role, target_role: Role) -> bool:
    """Owners can never be removed, whoever asks."""
    if _value(target_role) == MembershipRole.OWNER.value:
        return False
    return can_manage_members(profile_role, membership_role)


def can_create_task(profile_role: Role, membership_role: Role) -> bool:
    return is_admin(profile_role) or _has_membership(membership_role, TASK_CREATORS)


def can_update_task(profile_role: Role, membership_role: Role, is_assignee: bool) -> bool:
    return (
        is_admin(profile_role)
        or is_assignee
        or _has_membership(membership_role, TASK_EDITORS)
    )


def can_delete_task(profile_role: Role, membership_role: Role) -> bool:
    return is_admin(profile_role) or _has_membership(membership_role, TASK_EDITORS)


def can_invite_users(profile_role: Role) -> bool:
    return _value(profile_role) in USER_INVITERS


def require(allowed: bool, detail: str = "Insufficient permissions") -> None:
    """Raise Forbidden unless the decision allowed the action."""
    if not allowed:
        raise Forbidden(detail)
