"""User and profile factories for test data generation."""

from polyfactory import Use

from src.siteline.core.security import hash_password
from src.siteline.models import Profile, ProfileRole, User
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "site-crane-Girder-47!"


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def invited(cls, **kwargs):
        """A user who has not set a password yet."""
        return cls.build(hashed_password=None, **kwargs)

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)


class ProfileFactory(BaseFactory):
    """Factory for generating Profile test data. Defaults to a worker."""

    __model__ = Profile
    __set_foreign_keys__ = True  # ``id`` is both PK and FK to users.id

    id = Use(generate_uuid)
    email = Use(lambda: f"profile_{generate_uuid().hex[-8:]}@example.com")
    full_name = "Test Worker"
    role = ProfileRole.WORKER.value
    company = None
    phone = None
    avatar_url = None
    notification_preferences = Use(lambda: {"push": True, "email": True})
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        return cls.build(
            role=ProfileRole.ADMIN.value, full_name=kwargs.pop("full_name", "Ada Admin"), **kwargs
        )

    @classmethod
    def project_manager(cls, **kwargs):
        return cls.build(
            role=ProfileRole.PROJECT_MANAGER.value,
            full_name=kwargs.pop("full_name", "Pat Manager"),
            **kwargs,
        )

    @classmethod
    def contractor(cls, **kwargs):
        return cls.build(
            role=ProfileRole.CONTRACTOR.value,
            full_name=kwargs.pop("full_name", "Casey Contractor"),
            **kwargs,
        )

    @classmethod
    def worker(cls, **kwargs):
        return cls.build(**kwargs)
