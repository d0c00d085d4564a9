"""Project, membership and project task-list endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.siteline.api.dependencies import (
    CurrentProfile,
    MembershipServiceDep,
    ProjectServiceDep,
    TaskServiceDep,
)
from src.siteline.models import ProjectStatus, TaskPriority, TaskStatus
from src.siteline.schemas.common import MessageResponse
from src.siteline.schemas.project import (
    MemberAdd,
    MemberResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from src.siteline.schemas.task import TaskListResponse

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=ProjectListResponse,
    summary="List projects",
    description="Projects the caller created or belongs to (all projects for admins), "
    "newest first, with member counts and the caller's role.",
)
async def list_projects(
    profile: CurrentProfile,
    service: ProjectServiceDep,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ProjectListResponse:
    projects, total = await service.list_projects(
        profile,
        status=status_filter.value if status_filter else None,
        search=search,
        limit=limit,
        offset=offset,
    )
    return ProjectListResponse(projects=projects, total=total, limit=limit, offset=offset)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID, profile: CurrentProfile, service: ProjectServiceDep
) -> ProjectResponse:
    return ProjectResponse(project=await service.get_project(profile, project_id))


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="The caller becomes the project's owner.",
    responses={
        201: {"description": "Project created"},
        400: {"description": "Missing name or location, invalid budget or status"},
        403: {"description": "Only admins and project managers can create projects"},
    },
)
async def create_project(
    project_data: ProjectCreate, profile: CurrentProfile, service: ProjectServiceDep
) -> ProjectResponse:
    return ProjectResponse(project=await service.create_project(profile, project_data))


@router.api_route(
    "/{project_id}",
    methods=["PUT", "PATCH"],
    response_model=ProjectResponse,
    summary="Update project",
    description="Partial update. A status change notifies the other members.",
    responses={
        403: {"description": "Insufficient permissions"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    profile: CurrentProfile,
    service: ProjectServiceDep,
) -> ProjectResponse:
    return ProjectResponse(project=await service.update_project(profile, project_id, project_data))


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete project",
    description="Deletes the project together with its tasks and members.",
    responses={
        403: {"description": "Only the creator or an admin can delete a project"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID, profile: CurrentProfile, service: ProjectServiceDep
) -> MessageResponse:
    await service.delete_project(profile, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post(
    "/{project_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add member",
    responses={
        400: {"description": "Neither email nor user_id given, or invalid role"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Project or user not found"},
        409: {"description": "User is already a member of this project"},
    },
)
async def add_member(
    project_id: UUID,
    member_data: MemberAdd,
    profile: CurrentProfile,
    service: MembershipServiceDep,
) -> MemberResponse:
    return MemberResponse(member=await service.add_member(profile, project_id, member_data))


@router.delete(
    "/{project_id}/members/{member_id}",
    response_model=MessageResponse,
    summary="Remove member",
    responses={
        400: {"description": "Cannot remove project owner"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Project or member not found"},
    },
)
async def remove_member(
    project_id: UUID,
    member_id: UUID,
    profile: CurrentProfile,
    service: MembershipServiceDep,
) -> MessageResponse:
    await service.remove_member(profile, project_id, member_id)
    return MessageResponse(message="Member removed successfully")


@router.get(
    "/{project_id}/tasks",
    response_model=TaskListResponse,
    summary="List project tasks",
    responses={404: {"description": "Project not found"}},
)
async def list_project_tasks(
    project_id: UUID,
    profile: CurrentProfile,
    service: TaskServiceDep,
    status_filter: Annotated[TaskStatus | None, Query(alias="status")] = None,
    priority: TaskPriority | None = None,
    assigned_to: UUID | None = None,
) -> TaskListResponse:
    tasks = await service.list_tasks(
        profile,
        project_id,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
    )
    return TaskListResponse(tasks=tasks)
