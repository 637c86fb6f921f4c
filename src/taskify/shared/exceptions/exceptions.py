"""
Exception types shared by the backend layers.
"""

from typing import Any, Optional


class TaskifyError(Exception):
    """Base exception for all Taskify backend errors."""

    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskifyError):
    """Raised when request input is malformed or insufficient."""

    default_message = "Invalid request"


class NotFoundError(TaskifyError):
    """Raised when an identifier has no matching row."""

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found")


class StoreError(TaskifyError):
    """
    Raised when the persistence layer fails (connection, query or constraint).

    The original driver message is preserved in ``message`` for logging and
    the underlying exception is kept in ``cause``.
    """

    default_message = "Database operation failed"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ConfigurationError(TaskifyError):
    """Raised when settings cannot be parsed or are inconsistent."""

    default_message = "Invalid configuration"
