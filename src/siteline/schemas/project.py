"""Project and membership schemas for API request/response."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Self
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from src.siteline.models import MembershipRole, ProjectStatus
from src.siteline.schemas.common import blank_to_none, strip_optional
from src.siteline.schemas.profile import ProfileSummary

BUDGET_QUANTUM = Decimal("0.01")
# Integer digits allowed by the Numeric(14, 2) budget column.
BUDGET_MAX_DIGITS = 12


def parse_budget(v: Any) -> Decimal | None:
    """Budget arrives as a number or a form string; blank means no budget."""
    v = blank_to_none(v)
    if v is None:
        return None
    if isinstance(v, bool):
        raise ValueError("Budget must be a number")
    try:
        amount = Decimal(str(v).strip().replace(",", ""))
    except InvalidOperation:
        raise ValueError("Budget must be a number") from None
    if not amount.is_finite():
        raise ValueError("Budget must be a number")
    if amount < 0:
        raise ValueError("Budget cannot be negative")
    try:
        amount = amount.quantize(BUDGET_QUANTUM)
    except InvalidOperation:
        raise ValueError("Budget is too large") from None
    if amount.adjusted() >= BUDGET_MAX_DIGITS:
        raise ValueError("Budget is too large")
    return amount


class ProjectBase(BaseModel):
    description: str | None = Field(default=None, max_length=5000)
    address: str | None = Field(default=None, max_length=500)
    budget: Decimal | None = None
    start_date: date | None = None
    estimated_end_date: date | None = None
    actual_end_date: date | None = None

    @field_validator("budget", mode="before")
    @classmethod
    def validate_budget(cls, v: Any) -> Decimal | None:
        return parse_budget(v)

    @field_validator("start_date", "estimated_end_date", "actual_end_date", mode="before")
    @classmethod
    def validate_dates(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("description", "address")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)


class ProjectCreate(ProjectBase):
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=255)
    status: ProjectStatus = ProjectStatus.PLANNING

    @field_validator("name", "location")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty or whitespace only")
        return v


class ProjectUpdate(ProjectBase):
    """Partial update. Only fields present in the request are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    status: ProjectStatus | None = None

    @field_validator("name", "location")
    @classmethod
    def validate_required_text(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Value cannot be empty or whitespace only")
        return v

    def changes(self) -> dict[str, Any]:
        """Fields to write. Explicit nulls for non-nullable columns are dropped."""
        data = self.model_dump(exclude_unset=True)
        for field in ("name", "location", "status"):
            if field in data and data[field] is None:
                del data[field]
        if "status" in data:
            data["status"] = ProjectStatus(data["status"]).value
        return data


class ProjectRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    location: str
    address: str | None
    budget: Decimal | None
    start_date: date | None
    estimated_end_date: date | None
    actual_end_date: date | None
    status: str
    created_by: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MemberRead(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    role: str
    assigned_by: UUID | None
    assigned_at: datetime
    profile: ProfileSummary | None = None

    model_config = {"from_attributes": True}


class ProjectSummary(ProjectRead):
    """List row: project plus member count and the caller's role in it."""

    member_count: int = 0
    user_role: str | None = None


class ProjectDetail(ProjectRead):
    created_by_profile: ProfileSummary | None = None
    project_members: list[MemberRead] = []


class ProjectResponse(BaseModel):
    project: ProjectDetail


class ProjectListResponse(BaseModel):
    projects: list[ProjectSummary]
    total: int
    limit: int
    offset: int


class MemberAdd(BaseModel):
    """Add a member by email or by user id. Exactly one is required."""

    email: EmailStr | None = None
    user_id: UUID | None = None
    role: MembershipRole = MembershipRole.WORKER

    @field_validator("email", "user_id", mode="before")
    @classmethod
    def validate_identifier(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: MembershipRole) -> MembershipRole:
        if v == MembershipRole.OWNER:
            raise ValueError("The owner role cannot be assigned")
        return v

    @model_validator(mode="after")
    def validate_target(self) -> Self:
        if self.email is None and self.user_id is None:
            raise ValueError("Either email or user_id is required")
        return self


class MemberResponse(BaseModel):
    member: MemberRead
    message: str = "Member added successfully"
