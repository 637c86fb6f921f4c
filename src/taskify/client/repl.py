"""
REPL (Read-Eval-Print Loop) for the Taskify terminal client.
Uses prompt_toolkit for input handling and rich for output.
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout

from . import utils
from .view import TaskListView

log = logging.getLogger(__name__)

HELP_TEXT = """
**Available Commands:**

- `<text>` - Add a task with that title
- `/add <title>` - Add a task
- `/toggle <id>` - Mark a task finished or unfinished
- `/edit <id>` - Edit a task title (Enter saves, Ctrl+C cancels)
- `/delete <id>` - Delete a task
- `/refresh` - Reload the task list from the server
- `/help` - Show this help message
- `/exit` or `/quit` - Exit
"""


class TaskRepl:
    """
    Interactive loop around a ``TaskListView``.

    Plain input adds a task; slash commands dispatch the other intents. The
    list is re-rendered after every command that may have changed it.
    """

    def __init__(self, view: TaskListView, api_url: str, prompt: str = "taskify> "):
        self.view = view
        self.api_url = api_url
        self.prompt = prompt
        self.running = False

        self.prompt_session: PromptSession = PromptSession()

        self.commands: Dict[str, Callable[[str], Awaitable[None]]] = {
            "add": self.cmd_add,
            "toggle": self.cmd_toggle,
            "edit": self.cmd_edit,
            "delete": self.cmd_delete,
            "refresh": self.cmd_refresh,
            "list": self.cmd_list,
            "help": self.cmd_help,
            "exit": self.cmd_exit,
            "quit": self.cmd_exit,
        }

    async def start(self):
        """Load the list and run the loop until /exit or Ctrl+D."""
        self.running = True
        utils.print_welcome_banner(self.api_url)
        await self.view.mount()
        self.show()

        try:
            with patch_stdout():
                while self.running:
                    try:
                        user_input = await self.prompt_session.prompt_async(self.prompt)
                    except KeyboardInterrupt:
                        utils.console.print()
                        continue
                    except EOFError:
                        break

                    user_input = (user_input or "").strip()
                    if not user_input:
                        continue

                    if user_input.startswith("/"):
                        await self._handle_command(user_input)
                    else:
                        await self.cmd_add(user_input)
        finally:
            utils.print_goodbye()

    def show(self):
        utils.console.print(self.view.render())

    async def _handle_command(self, command_line: str):
        parts = command_line[1:].split(maxsplit=1)
        if not parts:
            utils.print_error("Empty command. Type /help for available commands.")
            return
        command_name = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        handler = self.commands.get(command_name)
        if handler is None:
            utils.print_error(
                f"Unknown command: /{command_name}. Type /help for available commands."
            )
            return
        try:
            await handler(args)
        except Exception as e:
            log.exception("Error executing command '%s': %s", command_name, e)
            utils.print_error(f"Command failed: {e}")

    def _parse_id(self, args: str) -> Optional[int]:
        raw = args.strip()
        try:
            task_id = int(raw)
        except ValueError:
            utils.print_error(f"Expected a task id, got {raw!r}.")
            return None
        if self.view.mirror.get(task_id) is None:
            utils.print_error(f"No task with id {task_id}.")
            return None
        return task_id

    # --- Slash Command Handlers ---

    async def cmd_add(self, args: str):
        self.view.draft = args
        if await self.view.submit_new():
            self.show()
        elif not args.strip():
            utils.print_error("Usage: /add <title>")

    async def cmd_toggle(self, args: str):
        task_id = self._parse_id(args)
        if task_id is not None and await self.view.toggle(task_id):
            self.show()

    async def cmd_edit(self, args: str):
        task_id = self._parse_id(args)
        if task_id is None or not self.view.start_edit(task_id):
            return
        self.show()

        while self.view.editing_id is not None:
            try:
                self.view.edit_draft = await self.prompt_session.prompt_async(
                    "title> ", default=self.view.edit_draft
                )
            except (KeyboardInterrupt, EOFError):
                self.view.cancel_edit()
                utils.print_status("Edit cancelled.")
                break

            if not self.view.edit_draft.strip():
                utils.print_status("Title cannot be empty. Press Ctrl+C to cancel.")
                continue
            await self.view.save_edit()

        self.show()

    async def cmd_delete(self, args: str):
        task_id = self._parse_id(args)
        if task_id is not None and await self.view.delete(task_id):
            utils.print_status(f"Task {task_id} deleted.")
            self.show()

    async def cmd_refresh(self, args: str):
        await self.view.retry()
        self.show()

    async def cmd_list(self, args: str):
        self.show()

    async def cmd_help(self, args: str):
        utils.console.print()
        utils.render_markdown(HELP_TEXT)
        utils.console.print()

    async def cmd_exit(self, args: str):
        self.running = False
