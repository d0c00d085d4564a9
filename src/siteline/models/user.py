"""Identity and profile models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.siteline.models.base import default_notification_preferences, utc_now
from src.siteline.models.enums import ProfileRole


class User(SQLModel, table=True):
    """Credential record. Invited users have no password until they accept."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str | None = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Profile(SQLModel, table=True):
    """One-to-one with User; carries the organisation role used for authorization."""

    __tablename__ = "profiles"

    id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    email: str = Field(max_length=255, index=True)
    full_name: str = Field(max_length=200)
    role: str = Field(default=ProfileRole.WORKER.value, max_length=50)
    company: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    avatar_url: str | None = Field(default=None, max_length=500)
    notification_preferences: dict[str, Any] = Field(
        default_factory=default_notification_preferences,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN.value

    def wants(self, channel: str) -> bool:
        """A channel is on unless the preference is explicitly False."""
        prefs = self.notification_preferences or {}
        return prefs.get(channel) is not False
