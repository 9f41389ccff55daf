"""
TaskNest API - Task Service

Business logic for owner-scoped task operations.
"""

from typing import Optional, List

from tasknest.tasks.models import Task
from tasknest.tasks.repository import TaskRepositoryInterface
from tasknest.tasks.schemas import TaskCreateRequest, TaskUpdateRequest, TaskResponse


class TaskService:
    """Service layer for task business logic."""

    def __init__(self, repository: TaskRepositoryInterface):
        self.repository = repository

    @staticmethod
    def _task_to_response(task: Task) -> TaskResponse:
        return TaskResponse(**task.to_dict())

    async def create_task(self, owner: str, request: TaskCreateRequest) -> TaskResponse:
        """Create a new task for the owner. Caller-supplied id/owner are dropped."""
        task = Task.create(
            owner=owner,
            title=request.title,
            description=request.description,
            extra=request.model_extra,
        )
        await self.repository.create(task)
        return self._task_to_response(task)

    async def get_task(self, task_id: str, owner: str) -> Optional[TaskResponse]:
        """Get a task by ID, scoped to owner."""
        task = await self.repository.get_by_id(task_id, owner)
        if task is None:
            return None
        return self._task_to_response(task)

    async def list_tasks(self, owner: str) -> List[TaskResponse]:
        """List tasks for owner in the order they were created."""
        tasks = await self.repository.list_by_owner(owner)
        return [self._task_to_response(task) for task in tasks]

    async def update_task(
        self,
        task_id: str,
        owner: str,
        request: TaskUpdateRequest,
    ) -> Optional[TaskResponse]:
        """Update title and/or description of a task, scoped to owner."""
        updates = {
            key: value
            for key, value in request.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if not updates:
            # No updates provided, just return current task
            return await self.get_task(task_id, owner)

        task = await self.repository.update(task_id, owner, updates)
        if task is None:
            return None
        return self._task_to_response(task)

    async def delete_task(self, task_id: str, owner: str) -> bool:
        """Delete a task, scoped to owner. Returns whether anything was removed."""
        return await self.repository.delete(task_id, owner)
