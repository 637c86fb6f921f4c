"""
Terminal client for Taskify.
"""

from .api import TaskApiClient, TransportError
from .state import TaskMirror
from .view import TaskListView

__all__ = ["TaskApiClient", "TransportError", "TaskMirror", "TaskListView"]
