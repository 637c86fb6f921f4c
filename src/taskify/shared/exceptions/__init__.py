"""
Exception types and handlers for consistent error handling.

Provides:
- Backend exception types (ValidationError, NotFoundError, StoreError, ...)
- FastAPI exception handlers producing ``{"error": ...}`` bodies
"""

from .exceptions import (
    ConfigurationError,
    NotFoundError,
    StoreError,
    TaskifyError,
    ValidationError,
)
from .exception_handlers import register_exception_handlers

__all__ = [
    "TaskifyError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
    "ConfigurationError",
    "register_exception_handlers",
]
