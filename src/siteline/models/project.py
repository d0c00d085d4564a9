"""Project and project membership models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.siteline.models.base import utc_now
from src.siteline.models.enums import MembershipRole, ProjectStatus


class Project(SQLModel, table=True):
    """A construction project. Owns its members and tasks."""

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200, index=True)
    description: str | None = Field(default=None)
    location: str = Field(max_length=255)
    address: str | None = Field(default=None, max_length=500)
    budget: Decimal | None = Field(default=None, max_digits=14, decimal_places=2)
    start_date: date | None = Field(default=None)
    estimated_end_date: date | None = Field(default=None)
    actual_end_date: date | None = Field(default=None)
    status: str = Field(default=ProjectStatus.PLANNING.value, max_length=20, index=True)
    created_by: UUID = Field(foreign_key="profiles.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectMember(SQLModel, table=True):
    """Join between a project and a profile, with a project-scoped role.

    The (project_id, user_id) unique constraint is the authoritative guard
    against duplicate membership under concurrent adds.
    """

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="profiles.id", index=True, ondelete="CASCADE")
    role: str = Field(default=MembershipRole.WORKER.value, max_length=20)
    assigned_by: UUID | None = Field(default=None, foreign_key="profiles.id", ondelete="SET NULL")
    assigned_at: datetime = Field(default_factory=utc_now)
