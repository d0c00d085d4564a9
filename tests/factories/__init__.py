"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProfileFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.project import (
    NotificationFactory,
    ProjectFactory,
    ProjectMemberFactory,
    TaskFactory,
)
from tests.factories.user import DEFAULT_TEST_PASSWORD, ProfileFactory, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Users
    "DEFAULT_TEST_PASSWORD",
    "ProfileFactory",
    "UserFactory",
    # Projects
    "NotificationFactory",
    "ProjectFactory",
    "ProjectMemberFactory",
    "TaskFactory",
]
