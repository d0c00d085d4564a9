"""In-app notification model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.siteline.models.base import utc_now


class Notification(SQLModel, table=True):
    """In-app notification history. Only ``read`` changes after insert."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="profiles.id", ondelete="CASCADE")
    type: str = Field(max_length=50)
    title: str = Field(max_length=255)
    message: str
    link: str | None = Field(default=None, max_length=500)
    project_id: UUID | None = Field(default=None, foreign_key="projects.id", ondelete="CASCADE")
    task_id: UUID | None = Field(default=None, foreign_key="tasks.id", ondelete="CASCADE")
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
