"""
Business logic for tasks: input validation and delegation to the repository.
"""

import logging
import re
from typing import Any, Optional, Union

from ...models import Task
from ...shared.exceptions import NotFoundError, ValidationError
from ..repository.interfaces import ITaskRepository

log = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3
TITLE_TOO_SHORT_MESSAGE = f"Task title must be at least {MIN_TITLE_LENGTH} characters"
INVALID_TASK_ID_MESSAGE = "Invalid task id"
FINISHED_NOT_BOOLEAN_MESSAGE = "Task finished flag must be a boolean"

_TASK_ID_PATTERN = re.compile(r"-?\d+")

# Signed 64-bit range of the id column; ids outside it cannot match a row.
MIN_TASK_ID = -(2**63)
MAX_TASK_ID = 2**63 - 1


class TaskService:
    """
    Validates task requests and runs them against an ``ITaskRepository``.

    Validation failures raise ``ValidationError`` before the store is touched.
    Missing rows raise ``NotFoundError``. ``StoreError`` from the repository is
    left to propagate to the caller.
    """

    def __init__(self, repository: ITaskRepository):
        self.repository = repository

    @staticmethod
    def parse_task_id(raw: Union[str, int]) -> int:
        """
        Parse a path identifier, rejecting anything that is not an integer.

        Integers outside the id column's range raise ``NotFoundError`` since
        no row can carry them.
        """
        if isinstance(raw, bool):
            raise ValidationError(INVALID_TASK_ID_MESSAGE)
        if isinstance(raw, int):
            parsed = raw
        elif isinstance(raw, str) and _TASK_ID_PATTERN.fullmatch(raw.strip()):
            parsed = int(raw.strip())
        else:
            raise ValidationError(INVALID_TASK_ID_MESSAGE)
        if not MIN_TASK_ID <= parsed <= MAX_TASK_ID:
            raise NotFoundError("Task", parsed)
        return parsed

    @staticmethod
    def clean_title(title: Any) -> str:
        """Trim a title and enforce the minimum length."""
        if not isinstance(title, str):
            raise ValidationError(TITLE_TOO_SHORT_MESSAGE)
        trimmed = title.strip()
        if len(trimmed) < MIN_TITLE_LENGTH:
            raise ValidationError(TITLE_TOO_SHORT_MESSAGE)
        return trimmed

    async def list_tasks(self) -> list[Task]:
        tasks = await self.repository.find_all()
        log.debug("Listed %d tasks", len(tasks))
        return tasks

    async def create_task(self, title: Any) -> Task:
        """Create an unfinished task from a trimmed title."""
        task = await self.repository.create(self.clean_title(title))
        log.info("Created task %d", task.id)
        return task

    async def update_task(
        self,
        task_id: Union[str, int],
        title: Optional[Any] = None,
        finished: Optional[Any] = None,
    ) -> Task:
        """
        Apply a partial update.

        Args:
            task_id: Path identifier; must parse as an integer.
            title: New title, or None to keep the stored one.
            finished: New completion flag, or None to keep the stored one.

        Returns:
            The full current row after the update.

        Raises:
            ValidationError: Bad id, short title or non-boolean flag.
            NotFoundError: No task with that id.
        """
        parsed_id = self.parse_task_id(task_id)
        cleaned_title = self.clean_title(title) if title is not None else None
        if finished is not None and not isinstance(finished, bool):
            raise ValidationError(FINISHED_NOT_BOOLEAN_MESSAGE)

        task = await self.repository.update(parsed_id, cleaned_title, finished)
        if task is None:
            raise NotFoundError("Task", parsed_id)
        log.info("Updated task %d", parsed_id)
        return task

    async def delete_task(self, task_id: Union[str, int]) -> None:
        parsed_id = self.parse_task_id(task_id)
        if not await self.repository.delete(parsed_id):
            raise NotFoundError("Task", parsed_id)
        log.info("Deleted task %d", parsed_id)
