"""
Client-side mirror of the server's task list.
"""

import logging
from typing import Optional

from ..models import Task
from .api import TaskApiClient, TransportError

log = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load tasks. Please check if backend is running."


class TaskMirror:
    """
    Ordered in-memory copy of the task list.

    The mirror only changes after the server confirms a call. A failed call
    raises ``TransportError`` and leaves ``tasks`` exactly as it was, so there
    is never anything to roll back. Replacements and removals are keyed by
    ``id``; completions for different rows may arrive in any order.
    """

    def __init__(self, api: TaskApiClient):
        self.api = api
        self.tasks: list[Task] = []
        self.loading = False
        self.error: Optional[str] = None

    def get(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    async def load(self) -> bool:
        """
        Replace the mirror with a fresh List.

        On failure ``error`` is set and the previous contents are kept.
        Calling this again is the retry path. Returns True on success.
        """
        self.loading = True
        try:
            tasks = await self.api.list_tasks()
        except TransportError as e:
            log.error("Failed to fetch tasks: %s", e.message)
            self.error = LOAD_ERROR_MESSAGE
            return False
        finally:
            self.loading = False

        self.tasks = tasks
        self.error = None
        return True

    async def add(self, title: str) -> Optional[Task]:
        """Create a task from trimmed text and prepend it. Blank text is ignored."""
        trimmed = title.strip()
        if not trimmed:
            return None
        task = await self.api.create_task(trimmed)
        self.tasks = [task, *self.tasks]
        return task

    async def toggle(self, task_id: int) -> Task:
        current = self._require(task_id)
        task = await self.api.update_task(task_id, finished=not current.finished)
        self._replace(task)
        return task

    async def rename(self, task_id: int, title: str) -> Task:
        self._require(task_id)
        task = await self.api.update_task(task_id, title=title)
        self._replace(task)
        return task

    async def remove(self, task_id: int) -> None:
        self._require(task_id)
        await self.api.delete_task(task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]

    def _require(self, task_id: int) -> Task:
        task = self.get(task_id)
        if task is None:
            raise KeyError(task_id)
        return task

    def _replace(self, updated: Task) -> None:
        # The row may have been removed locally while the call was in flight.
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]
