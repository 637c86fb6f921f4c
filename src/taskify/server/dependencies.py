"""
FastAPI dependencies for the task API.

The query gateway is process-wide state: the application lifespan sets it on
startup and clears it on shutdown. Routers reach it only through the getters
below, which tests can replace with ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status

from ..database.query_gateway import QueryGateway
from .repository.task_repository import TaskRepository
from .services.task_service import TaskService

log = logging.getLogger(__name__)

query_gateway: Optional[QueryGateway] = None


def set_query_gateway(gateway: QueryGateway):
    """Called by the application lifespan to provide the shared gateway."""
    global query_gateway
    if query_gateway is not None and query_gateway is not gateway:
        log.warning("Query gateway already set; replacing it.")
    query_gateway = gateway
    log.info("Query gateway provided.")


def clear_query_gateway():
    """Forget the shared gateway. Does not close it."""
    global query_gateway
    query_gateway = None


def get_query_gateway() -> QueryGateway:
    """FastAPI dependency to get the shared query gateway."""
    if query_gateway is None:
        log.critical("Query gateway accessed before it was set!")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not yet initialized.",
        )
    return query_gateway


def get_task_repository(
    gateway: QueryGateway = Depends(get_query_gateway),
) -> TaskRepository:
    return TaskRepository(gateway)


def get_task_service(
    repository: TaskRepository = Depends(get_task_repository),
) -> TaskService:
    """FastAPI dependency to get a task service bound to the shared gateway."""
    return TaskService(repository)
