"""Task model."""

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.siteline.models.base import utc_now
from src.siteline.models.enums import TaskPriority, TaskStatus


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    title: str = Field(max_length=255)
    description: str | None = Field(default=None)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20, index=True)
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=20)
    assigned_to: UUID | None = Field(
        default=None, foreign_key="profiles.id", index=True, ondelete="SET NULL"
    )
    due_date: date | None = Field(default=None, index=True)
    estimated_hours: float | None = Field(default=None)
    actual_hours: float | None = Field(default=None)
    depends_on: UUID | None = Field(default=None, foreign_key="tasks.id", ondelete="SET NULL")
    location: str | None = Field(default=None, max_length=255)
    created_by: UUID | None = Field(default=None, foreign_key="profiles.id", ondelete="SET NULL")
    # Stamped once, on the first transition into completed
    completed_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
