"""
Repository layer containing the task data access logic.
"""

from .interfaces import ITaskRepository
from .task_repository import TaskRepository

__all__ = [
    "ITaskRepository",
    "TaskRepository",
]
