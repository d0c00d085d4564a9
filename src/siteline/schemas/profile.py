from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.siteline.models import ProfileRole
from src.siteline.schemas.common import strip_optional


class ProfileSummary(BaseModel):
    """Compact profile embedded in projects, members and tasks."""

    id: UUID
    full_name: str
    email: str
    avatar_url: str | None = None

    model_config = {"from_attributes": True}


class ProfileRead(BaseModel):
    id: UUID
    email: str
    full_name: str
    role: str
    company: str | None
    phone: str | None
    avatar_url: str | None
    notification_preferences: dict[str, bool]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Self-service profile changes. Role and email are not editable here."""

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    company: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    avatar_url: str | None = Field(default=None, max_length=500)
    notification_preferences: dict[str, bool] | None = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Full name cannot be empty or whitespace only")
        return v

    @field_validator("company", "phone", "avatar_url")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)

    @field_validator("notification_preferences")
    @classmethod
    def validate_preferences(cls, v: dict[str, bool] | None) -> dict[str, bool] | None:
        if v is not None:
            unknown = set(v) - {"push", "email"}
            if unknown:
                raise ValueError(f"Unknown notification channels: {', '.join(sorted(unknown))}")
        return v


class ProfileResponse(BaseModel):
    profile: ProfileRead


class ProfileListResponse(BaseModel):
    profiles: list[ProfileRead]


class InviteUserRequest(BaseModel):
    """Admin or project manager invites someone who has no account yet."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=200)
    role: ProfileRole
    company: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name cannot be empty or whitespace only")
        return v

    @field_validator("company", "phone")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)


class InviteUserResponse(BaseModel):
    user: ProfileRead
    message: str = "Invitation sent successfully"
