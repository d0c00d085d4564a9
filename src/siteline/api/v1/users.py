"""User profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from starlette.requests import Request

from src.siteline.api.dependencies import CurrentProfile, InviteServiceDep, ProfileServiceDep
from src.siteline.core.rate_limit import invite_limit, limiter
from src.siteline.models import ProfileRole
from src.siteline.schemas.profile import (
    InviteUserRequest,
    InviteUserResponse,
    ProfileListResponse,
    ProfileRead,
    ProfileResponse,
    ProfileUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse, summary="Get my profile")
async def get_me(profile: CurrentProfile) -> ProfileResponse:
    return ProfileResponse(profile=ProfileRead.model_validate(profile))


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update my profile",
    description="Name, contact details, avatar and notification preferences. "
    "Role and email cannot be changed here.",
)
async def update_me(
    update_data: ProfileUpdate, profile: CurrentProfile, service: ProfileServiceDep
) -> ProfileResponse:
    updated = await service.update_me(profile, update_data)
    return ProfileResponse(profile=ProfileRead.model_validate(updated))


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List profiles",
    description="Directory of profiles used by member and assignee pickers.",
)
async def list_profiles(
    _profile: CurrentProfile,
    service: ProfileServiceDep,
    search: Annotated[str | None, Query(max_length=100)] = None,
    role: ProfileRole | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 100,
) -> ProfileListResponse:
    profiles = await service.directory(
        search=search, role=role.value if role else None, limit=limit
    )
    return ProfileListResponse(profiles=[ProfileRead.model_validate(p) for p in profiles])


@router.post(
    "/invite",
    response_model=InviteUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a user",
    responses={
        201: {"description": "Account created and set-password email sent"},
        403: {"description": "Only admins and project managers can invite"},
        409: {"description": "User with this email already exists"},
    },
)
@limiter.limit(invite_limit)
async def invite_user(
    request: Request,
    invite_data: InviteUserRequest,
    profile: CurrentProfile,
    service: InviteServiceDep,
) -> InviteUserResponse:
    invited = await service.invite(profile, invite_data)
    return InviteUserResponse(user=ProfileRead.model_validate(invited))
