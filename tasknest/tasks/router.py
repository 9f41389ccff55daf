"""
TaskNest API - Task Router

CRUD endpoints for task management.
All endpoints are bearer-token protected and owner-scoped.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from tasknest.storage import JsonDocument, get_tasks_document
from tasknest.auth.dependencies import CurrentIdentity
from tasknest.tasks.service import TaskService
from tasknest.tasks.repository import JsonTaskRepository, TaskRepositoryInterface
from tasknest.tasks.schemas import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
    TaskDeleteResponse,
)


router = APIRouter(prefix="/tasks", tags=["Tasks"])


async def get_task_repository(
    document: Annotated[JsonDocument, Depends(get_tasks_document)]
) -> TaskRepositoryInterface:
    """Dependency to get task repository instance."""
    return JsonTaskRepository(document)


async def get_task_service(
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)]
) -> TaskService:
    """Dependency to get task service instance."""
    return TaskService(repository)


@router.get(
    "",
    response_model=List[TaskResponse],
    summary="List tasks",
)
async def list_tasks(
    identity: CurrentIdentity,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> List[TaskResponse]:
    """List the caller's tasks in the order they were created."""
    return await service.list_tasks(identity)


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    request: TaskCreateRequest,
    identity: CurrentIdentity,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Create a new task for the authenticated user.

    The ID is generated and the owner is taken from the token; any `id` or
    `owner` in the body is ignored.
    """
    return await service.create_task(owner=identity, request=request)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task by ID",
)
async def get_task(
    task_id: str,
    identity: CurrentIdentity,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Get a specific task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    task = await service.get_task(task_id, identity)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    identity: CurrentIdentity,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Update a task's title and/or description.

    Other fields in the body, including `id` and `owner`, are ignored.
    Returns 404 if the task doesn't exist or belongs to another user.
    """
    task = await service.update_task(task_id, identity, request)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


@router.delete(
    "/{task_id}",
    response_model=TaskDeleteResponse,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    identity: CurrentIdentity,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskDeleteResponse:
    """
    Delete a task by ID.

    Deleting a task that doesn't exist, or belongs to another user, is a
    no-op and still succeeds.
    """
    await service.delete_task(task_id, identity)
    return TaskDeleteResponse(message="Task deleted successfully", id=task_id)
