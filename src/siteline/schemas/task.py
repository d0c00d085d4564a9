"""Task schemas.

``TaskUpdate.from_payload`` is the single place that decides which task
fields a client may change. Anything else in the payload is dropped.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, ClassVar, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.siteline.core.exceptions import ValidationError
from src.siteline.models import TaskPriority, TaskStatus
from src.siteline.schemas.common import blank_to_none, strip_optional
from src.siteline.schemas.profile import ProfileSummary


class TaskCreate(BaseModel):
    project_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: UUID | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    depends_on: UUID | None = None
    location: str | None = Field(default=None, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty or whitespace only")
        return v

    @field_validator("assigned_to", "due_date", "estimated_hours", "depends_on", mode="before")
    @classmethod
    def validate_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("description", "location")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)


class TaskUpdate(BaseModel):
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "title",
            "description",
            "status",
            "priority",
            "assigned_to",
            "due_date",
            "estimated_hours",
            "actual_hours",
            "depends_on",
            "location",
        }
    )
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset({"title", "status", "priority"})

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: UUID | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    depends_on: UUID | None = None
    location: str | None = Field(default=None, max_length=255)

    model_config = {"extra": "ignore"}

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Task title cannot be empty or whitespace only")
        return v

    @field_validator(
        "assigned_to", "due_date", "estimated_hours", "actual_hours", "depends_on", mode="before"
    )
    @classmethod
    def validate_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("description", "location")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Self:
        """Keep allow-listed keys only, then validate them.

        Raises:
            ValidationError: A kept field has an invalid value.
        """
        kept = {k: v for k, v in payload.items() if k in cls.UPDATABLE_FIELDS}
        try:
            return cls.model_validate(kept)
        except PydanticValidationError as e:
            first = e.errors()[0]
            loc = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"{loc}: {first['msg']}") from e

    def changes(self) -> dict[str, Any]:
        """Fields to write, with enum values flattened to strings."""
        data = self.model_dump(exclude_unset=True)
        for field in self.NON_NULLABLE:
            if field in data and data[field] is None:
                del data[field]
        for field in ("status", "priority"):
            if field in data:
                data[field] = getattr(data[field], "value", data[field])
        return data


class TaskRead(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: str | None
    status: str
    priority: str
    assigned_to: UUID | None
    due_date: date | None
    estimated_hours: float | None
    actual_hours: float | None
    depends_on: UUID | None
    location: str | None
    created_by: UUID | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    assigned_to_profile: ProfileSummary | None = None
    created_by_profile: ProfileSummary | None = None

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    task: TaskRead
    message: str


class TaskListResponse(BaseModel):
    tasks: list[TaskRead]
