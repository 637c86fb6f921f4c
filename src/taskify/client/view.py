"""
Task list view: turns user intents into mirror calls and renders the mirror.
"""

import logging
from typing import Callable, Optional

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from ..models import Task
from .api import TransportError
from .state import TaskMirror

log = logging.getLogger(__name__)

ADD_FAILED_MESSAGE = "Failed to add task"
UPDATE_FAILED_MESSAGE = "Failed to update task"
DELETE_FAILED_MESSAGE = "Failed to delete task"
EMPTY_STATE_MESSAGE = "No tasks yet. Add one above!"
LOADING_MESSAGE = "Loading tasks..."


class TaskListView:
    """
    Owns the mirror, the new-task draft and the per-row edit mode.

    Failed mutations are reported through ``alert`` and never change the
    mirror. Only one row can be in edit mode at a time.
    """

    def __init__(self, mirror: TaskMirror, alert: Callable[[str], None]):
        self.mirror = mirror
        self.alert = alert
        self.draft = ""
        self.editing_id: Optional[int] = None
        self.edit_draft = ""

    async def mount(self) -> bool:
        return await self.mirror.load()

    async def retry(self) -> bool:
        return await self.mirror.load()

    async def submit_new(self) -> Optional[Task]:
        """Create a task from ``draft``; the draft is cleared only on success."""
        try:
            task = await self.mirror.add(self.draft)
        except TransportError as e:
            log.error("Failed to add task: %s", e.message)
            self.alert(ADD_FAILED_MESSAGE)
            return None
        if task is not None:
            self.draft = ""
        return task

    async def toggle(self, task_id: int) -> Optional[Task]:
        try:
            return await self.mirror.toggle(task_id)
        except TransportError as e:
            log.error("Failed to update task %s: %s", task_id, e.message)
            self.alert(UPDATE_FAILED_MESSAGE)
            return None

    async def delete(self, task_id: int) -> bool:
        try:
            await self.mirror.remove(task_id)
        except TransportError as e:
            log.error("Failed to delete task %s: %s", task_id, e.message)
            self.alert(DELETE_FAILED_MESSAGE)
            return False
        if self.editing_id == task_id:
            self.cancel_edit()
        return True

    def start_edit(self, task_id: int) -> bool:
        """Enter edit mode for a row, seeding the draft with its title."""
        task = self.mirror.get(task_id)
        if task is None:
            return False
        self.editing_id = task_id
        self.edit_draft = task.title
        return True

    async def save_edit(self) -> bool:
        """
        Rename the row being edited.

        A blank draft is ignored and edit mode stays on. On failure an alert
        is shown and edit mode also stays on so the draft is not lost.
        """
        if self.editing_id is None or not self.edit_draft.strip():
            return False
        try:
            await self.mirror.rename(self.editing_id, self.edit_draft)
        except TransportError as e:
            log.error("Failed to update task %s: %s", self.editing_id, e.message)
            self.alert(UPDATE_FAILED_MESSAGE)
            return False
        self.cancel_edit()
        return True

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.edit_draft = ""

    def render(self) -> RenderableType:
        """Build the current screen as a rich renderable."""
        if self.mirror.loading:
            return Text(LOADING_MESSAGE, style="dim")

        parts: list[RenderableType] = []
        if self.mirror.error:
            parts.append(
                Text.assemble(
                    ("⚠️  ", "bold red"),
                    (self.mirror.error, "red"),
                    ("  (type /refresh to retry)", "dim"),
                )
            )

        if not self.mirror.tasks:
            parts.append(Text(f"📝 {EMPTY_STATE_MESSAGE}", style="dim"))
            return Group(*parts)

        table = Table(title=f"Tasks ({len(self.mirror.tasks)})")
        table.add_column("ID", style="cyan", justify="right", no_wrap=True)
        table.add_column("Done", justify="center")
        table.add_column("Title", style="white")
        table.add_column("Updated", style="dim")

        for task in self.mirror.tasks:
            if task.id == self.editing_id:
                title = Text.assemble((self.edit_draft, "bold yellow"), ("  (editing)", "dim"))
            elif task.finished:
                title = Text(task.title, style="strike dim")
            else:
                title = Text(task.title)
            table.add_row(
                str(task.id),
                "✅" if task.finished else "⬜",
                title,
                task.updated_at.strftime("%Y-%m-%d %H:%M"),
            )

        parts.append(table)
        return Group(*parts)
