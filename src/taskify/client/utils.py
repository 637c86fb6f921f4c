"""
Console helpers for the Taskify terminal client.
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

# Create a global console instance for the client
console = Console()


def print_welcome_banner(api_url: str):
    """Display welcome banner when the client starts."""
    banner = f"""
🚀 **Taskify**

Connected to `{api_url}`.
Type a task title to add it, or use `/help` for commands.
Press Ctrl+D or type `/exit` to quit.
"""
    console.print(Markdown(banner))
    console.print()


def print_goodbye():
    """Display goodbye message when exiting."""
    console.print("\n[bold blue]Goodbye! 👋[/bold blue]\n")


def render_markdown(text: str):
    """Render markdown text to the console."""
    console.print(Markdown(text))


def print_alert(message: str):
    """Display a boxed alert for a failed action."""
    console.print(Panel(message, title="Alert", border_style="red", expand=False))


def print_error(message: str):
    """Display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_status(message: str):
    """Display a status message."""
    console.print(f"[dim]{message}[/dim]")
