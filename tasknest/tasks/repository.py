"""
TaskNest API - Task Repository

Repository pattern for task data access over the tasks JSON document.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List

from tasknest.storage import JsonDocument
from tasknest.tasks.models import Task, MUTABLE_FIELDS

logger = logging.getLogger(__name__)


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for task repository.

    All operations are scoped by owner to enforce ownership isolation.
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def get_by_id(self, task_id: str, owner: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def list_by_owner(self, owner: str) -> List[Task]:
        """List tasks for owner in insertion order."""
        pass

    @abstractmethod
    async def update(self, task_id: str, owner: str, updates: dict) -> Optional[Task]:
        pass

    @abstractmethod
    async def delete(self, task_id: str, owner: str) -> bool:
        pass


def _owned(doc: dict, task_id: str, owner: str) -> bool:
    return doc.get("id") == task_id and doc.get("owner") == owner


class JsonTaskRepository(TaskRepositoryInterface):
    """
    JSON document implementation of the task repository.

    Every write is a full read-modify-write of the collection, serialized by
    the document.
    """

    def __init__(self, document: JsonDocument):
        self.document = document

    async def create(self, task: Task) -> Task:
        def append(tasks: list[dict]) -> Task:
            tasks.append(task.to_dict())
            return task

        await self.document.update(append)
        logger.info(f"[JsonTaskRepository] Task created: id={task.id}, owner={task.owner}")
        return task

    async def get_by_id(self, task_id: str, owner: str) -> Optional[Task]:
        for doc in await self.document.read_all():
            if _owned(doc, task_id, owner):
                return Task.from_dict(doc)
        return None

    async def list_by_owner(self, owner: str) -> List[Task]:
        return [
            Task.from_dict(doc)
            for doc in await self.document.read_all()
            if doc.get("owner") == owner
        ]

    async def update(self, task_id: str, owner: str, updates: dict) -> Optional[Task]:
        def apply(tasks: list[dict]) -> Optional[Task]:
            for index, doc in enumerate(tasks):
                if not _owned(doc, task_id, owner):
                    continue
                task = Task.from_dict(doc)
                for key, value in updates.items():
                    if key in MUTABLE_FIELDS:
                        setattr(task, key, value)
                tasks[index] = task.to_dict()
                return task
            return None

        task = await self.document.update(apply)
        if task is not None:
            logger.info(f"[JsonTaskRepository] Task updated: id={task_id}, owner={owner}")
        return task

    async def delete(self, task_id: str, owner: str) -> bool:
        def remove(tasks: list[dict]) -> bool:
            kept = [doc for doc in tasks if not _owned(doc, task_id, owner)]
            removed = len(kept) != len(tasks)
            tasks[:] = kept
            return removed

        removed = await self.document.update(remove)
        if removed:
            logger.info(f"[JsonTaskRepository] Task deleted: id={task_id}, owner={owner}")
        return removed
