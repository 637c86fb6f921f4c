"""
Command line entry point: ``taskify serve``, ``taskify ui`` and ``taskify health``.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Optional

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .config import Settings
from .logging_config import setup_colored_logging
from .shared.exceptions import ConfigurationError

log = logging.getLogger(__name__)


def error_exit(message: str):
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__, "-v", "--version", help="Show the CLI version and exit."
)
@click.option(
    "-u",
    "--system-env",
    is_flag=True,
    default=False,
    help="Use system environment variables only; do not load .env file.",
)
@click.pass_context
def cli(ctx: click.Context, system_env: bool):
    """Taskify: a minimal task tracker."""
    env_path = ""
    if not system_env:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(dotenv_path=env_path, override=True)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        error_exit(f"Error: {e.message}")

    setup_colored_logging(level=settings.log_level)

    if system_env:
        log.info("Skipping .env file loading due to --system-env flag.")
    elif env_path:
        log.info("Loaded environment variables from: %s", env_path)
    else:
        log.debug(".env file not found; using the process environment only.")

    ctx.obj = settings


@cli.command()
@click.option("--host", default=None, help="Interface to bind (default: HOST or 0.0.0.0).")
@click.option("--port", type=int, default=None, help="Port to listen on (default: PORT or 5000).")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes.")
@click.option(
    "--init-schema",
    is_flag=True,
    default=False,
    help="Create the tasks table on startup if it does not exist.",
)
@click.pass_obj
def serve(
    settings: Settings,
    host: Optional[str],
    port: Optional[int],
    reload: bool,
    init_schema: bool,
):
    """Run the REST backend under uvicorn."""
    import uvicorn

    host = host or settings.server.host
    port = port if port is not None else settings.server.port
    if init_schema:
        settings.server.init_schema = True

    log.info("Starting Taskify backend on %s:%d", host, port)

    if reload:
        # The reloader re-imports the app in a child process, so settings
        # travel through the environment.
        if init_schema:
            os.environ["TASKIFY_INIT_SCHEMA"] = "true"
        uvicorn.run(
            "taskify.server.main:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_config=None,
        )
        return

    from .server.main import create_app

    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


@cli.command()
@click.option("--url", default=None, help="API base URL (default: TASKIFY_API_URL).")
@click.pass_obj
def ui(settings: Settings, url: Optional[str]):
    """Open the interactive terminal client."""
    from .client.api import TaskApiClient
    from .client.repl import TaskRepl
    from .client.state import TaskMirror
    from .client.utils import print_alert
    from .client.view import TaskListView

    api_url = url or settings.client.api_url
    if settings.log_level != "DEBUG":
        # Failures are already shown as alerts and banners.
        logging.getLogger("taskify.client").setLevel(logging.CRITICAL)

    async def _run():
        async with TaskApiClient(api_url, timeout=settings.client.timeout_seconds) as api:
            view = TaskListView(TaskMirror(api), alert=print_alert)
            await TaskRepl(view, api_url).start()

    asyncio.run(_run())


@cli.command()
@click.option("--url", default=None, help="API base URL (default: TASKIFY_API_URL).")
@click.pass_obj
def health(settings: Settings, url: Optional[str]):
    """Check that the backend can reach its database."""
    from .client.api import TaskApiClient, TransportError

    api_url = url or settings.client.api_url

    async def _check() -> dict:
        async with TaskApiClient(api_url, timeout=settings.client.timeout_seconds) as api:
            return await api.health()

    try:
        result = asyncio.run(_check())
    except TransportError as e:
        error_exit(f"Unhealthy: {e.message}")

    click.echo(json.dumps(result, indent=2))


def main():
    cli()


if __name__ == "__main__":
    main()
