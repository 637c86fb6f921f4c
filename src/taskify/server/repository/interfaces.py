"""
Repository interfaces defining contracts for data access.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ...models import Task


class ITaskRepository(ABC):
    """Interface for task data access operations."""

    @abstractmethod
    async def find_all(self) -> list[Task]:
        """Return every task, newest id first."""
        pass

    @abstractmethod
    async def find_by_id(self, task_id: int) -> Optional[Task]:
        """Find a single task by id."""
        pass

    @abstractmethod
    async def create(self, title: str) -> Task:
        """Insert an unfinished task and return the stored row."""
        pass

    @abstractmethod
    async def update(
        self, task_id: int, title: Optional[str], finished: Optional[bool]
    ) -> Optional[Task]:
        """Apply the supplied fields and return the current row, or None if missing."""
        pass

    @abstractmethod
    async def delete(self, task_id: int) -> bool:
        """Delete a task. Returns False when no row matched."""
        pass
