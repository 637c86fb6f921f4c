"""
API Router for listing, creating, updating and deleting tasks.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, StrictBool, StrictStr

from ...models import Task
from ...shared.exceptions import StoreError
from ..dependencies import get_task_service
from ..services.task_service import TaskService

log = logging.getLogger(__name__)

router = APIRouter()


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""

    title: Optional[StrictStr] = Field(None, description="Task title, trimmed")


class UpdateTaskRequest(BaseModel):
    """Request model for a partial task update. Omitted or null fields are kept."""

    title: Optional[StrictStr] = Field(None, description="New title, trimmed")
    finished: Optional[StrictBool] = Field(None, description="New completion flag")


class MessageResponse(BaseModel):
    message: str


@router.get("/tasks", response_model=list[Task], tags=["Tasks"])
async def list_tasks(task_service: TaskService = Depends(get_task_service)):
    """Return every task, newest first."""
    log_prefix = "[GET /api/tasks] "
    try:
        tasks = await task_service.list_tasks()
    except StoreError as e:
        log.error("%sError fetching tasks: %s", log_prefix, e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tasks",
        )
    log.info("%sReturning %d tasks", log_prefix, len(tasks))
    return tasks


@router.post(
    "/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    tags=["Tasks"],
)
async def create_task(
    payload: Optional[CreateTaskRequest] = None,
    task_service: TaskService = Depends(get_task_service),
):
    """Create an unfinished task."""
    log_prefix = "[POST /api/tasks] "
    title = payload.title if payload else None
    try:
        task = await task_service.create_task(title)
    except StoreError as e:
        log.error("%sError creating task: %s", log_prefix, e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create task",
        )
    log.info("%sCreated task %d", log_prefix, task.id)
    return task


@router.put("/tasks/{task_id}", response_model=Task, tags=["Tasks"])
async def update_task(
    task_id: str,
    payload: Optional[UpdateTaskRequest] = None,
    task_service: TaskService = Depends(get_task_service),
):
    """Apply a partial update and return the full current row."""
    log_prefix = f"[PUT /api/tasks/{task_id}] "
    payload = payload or UpdateTaskRequest()
    try:
        task = await task_service.update_task(
            task_id, title=payload.title, finished=payload.finished
        )
    except StoreError as e:
        log.error("%sError updating task: %s", log_prefix, e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update task",
        )
    log.info("%sTask updated", log_prefix)
    return task


@router.delete("/tasks/{task_id}", response_model=MessageResponse, tags=["Tasks"])
async def delete_task(
    task_id: str,
    task_service: TaskService = Depends(get_task_service),
):
    """Hard-delete a task."""
    log_prefix = f"[DELETE /api/tasks/{task_id}] "
    try:
        await task_service.delete_task(task_id)
    except StoreError as e:
        log.error("%sError deleting task: %s", log_prefix, e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete task",
        )
    log.info("%sTask deleted", log_prefix)
    return MessageResponse(message="Task deleted successfully")
