"""
Task repository: the SQL behind the task operations, executed through the
query gateway.
"""

from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, bindparam, text

from ...database.query_gateway import QueryGateway
from ...models import Task
from ...shared.exceptions import StoreError
from .interfaces import ITaskRepository

TASK_COLUMNS = "id, title, finished, updated_at"

_RESULT_TYPES = {
    "id": Integer,
    "title": String,
    "finished": Boolean,
    "updated_at": DateTime(timezone=True),
}

_ID = bindparam("id", type_=Integer)
_TITLE = bindparam("title", type_=String)
_FINISHED = bindparam("finished", type_=Boolean)


def _returning_task(sql: str, *binds):
    """Attach result column types so every dialect yields Python values."""
    return text(sql).bindparams(*binds).columns(**_RESULT_TYPES)


SELECT_ALL = _returning_task(f"SELECT {TASK_COLUMNS} FROM tasks ORDER BY id DESC")

SELECT_BY_ID = _returning_task(f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = :id", _ID)

_INSERT_SQL = "INSERT INTO tasks (title, finished) VALUES (:title, :finished)"

INSERT_RETURNING = _returning_task(
    f"{_INSERT_SQL} RETURNING {TASK_COLUMNS}", _TITLE, _FINISHED
)

INSERT = text(_INSERT_SQL).bindparams(_TITLE, _FINISHED)

_UPDATE_SQL = (
    "UPDATE tasks SET "
    "title = COALESCE(:title, title), "
    "finished = COALESCE(:finished, finished), "
    "updated_at = CURRENT_TIMESTAMP "
    "WHERE id = :id"
)

UPDATE_RETURNING = _returning_task(
    f"{_UPDATE_SQL} RETURNING {TASK_COLUMNS}", _TITLE, _FINISHED, _ID
)

UPDATE = text(_UPDATE_SQL).bindparams(_TITLE, _FINISHED, _ID)

DELETE = text("DELETE FROM tasks WHERE id = :id").bindparams(_ID)


class TaskRepository(ITaskRepository):
    """Task data access over a ``QueryGateway``."""

    def __init__(self, gateway: QueryGateway):
        self.gateway = gateway

    async def find_all(self) -> list[Task]:
        result = await self.gateway.execute(SELECT_ALL)
        return [self._row_to_entity(row) for row in result.rows]

    async def find_by_id(self, task_id: int) -> Optional[Task]:
        result = await self.gateway.execute(SELECT_BY_ID, {"id": task_id})
        row = result.first()
        return self._row_to_entity(row) if row else None

    async def create(self, title: str) -> Task:
        params = {"title": title, "finished": False}

        if self.gateway.supports_returning("insert"):
            result = await self.gateway.execute(INSERT_RETURNING, params)
            return self._row_to_entity(result.first())

        result = await self.gateway.execute(INSERT, params, lastrowid=True)
        task = await self.find_by_id(result.lastrowid)
        if task is None:
            raise StoreError(f"Inserted task {result.lastrowid} could not be read back")
        return task

    async def update(
        self, task_id: int, title: Optional[str], finished: Optional[bool]
    ) -> Optional[Task]:
        """
        Set each supplied field and refresh ``updated_at``; None keeps the
        stored value.

        With ``UPDATE ... RETURNING`` the write and the read are one
        statement. Without it the row is re-selected afterwards, and that read
        reflects this call's write but possibly also later writes by others.
        """
        params = {"id": task_id, "title": title, "finished": finished}

        if self.gateway.supports_returning("update"):
            result = await self.gateway.execute(UPDATE_RETURNING, params)
            row = result.first()
            return self._row_to_entity(row) if row else None

        # rowcount is not used here: MySQL reports changed rows, not matched ones.
        await self.gateway.execute(UPDATE, params)
        return await self.find_by_id(task_id)

    async def delete(self, task_id: int) -> bool:
        result = await self.gateway.execute(DELETE, {"id": task_id})
        return result.rowcount > 0

    def _row_to_entity(self, row: dict) -> Task:
        """Convert a result row to a domain entity."""
        return Task.model_validate(row)
