"""
Task model shared by the REST backend and the client mirror.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Task(BaseModel):
    """A persisted unit of work."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    finished: bool
    updated_at: datetime
