"""Task endpoints."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, status

from src.siteline.api.dependencies import CurrentProfile, TaskServiceDep
from src.siteline.schemas.common import MessageResponse
from src.siteline.schemas.task import TaskCreate, TaskResponse, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses={
        400: {"description": "Invalid field or assignee is not a project member"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Project not found"},
    },
)
async def create_task(
    task_data: TaskCreate, profile: CurrentProfile, service: TaskServiceDep
) -> TaskResponse:
    task = await service.create_task(profile, task_data)
    return TaskResponse(task=task, message="Task created successfully")


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update task",
    description="Only title, description, status, priority, assigned_to, due_date, "
    "estimated_hours, actual_hours, depends_on and location are applied; "
    "other keys are ignored.",
    responses={
        400: {"description": "Invalid field or assignee is not a project member"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    payload: Annotated[dict[str, Any], Body()],
    profile: CurrentProfile,
    service: TaskServiceDep,
) -> TaskResponse:
    task = await service.update_task(profile, task_id, TaskUpdate.from_payload(payload))
    return TaskResponse(task=task, message="Task updated successfully")


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete task",
    responses={
        403: {"description": "Insufficient permissions"},
        404: {"description": "Task not found"},
    },
)
async def delete_task(
    task_id: UUID, profile: CurrentProfile, service: TaskServiceDep
) -> MessageResponse:
    await service.delete_task(profile, task_id)
    return MessageResponse(message="Task deleted successfully")
