"""
Service layer for the task API.
"""

from .task_service import TaskService

__all__ = ["TaskService"]
