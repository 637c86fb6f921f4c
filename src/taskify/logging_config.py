"""
Colored console logging for Taskify.

Log levels are colored and backend logger names (server, database, uvicorn)
are highlighted so that request handling is easy to follow in a terminal.
"""

import logging
import os
import sys
from typing import Optional, Union

RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1m\033[31m",
}

BACKEND_COLOR = "\033[34m"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and backend logger names."""

    BACKEND_KEYWORDS = ("taskify.server", "taskify.database", "uvicorn", "fastapi")

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
        stream=None,
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and _supports_color(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname, name = record.levelname, record.name
        record.levelname = f"{LEVEL_COLORS.get(record.levelno, '')}{levelname}{RESET}"
        if name.startswith(self.BACKEND_KEYWORDS):
            record.name = f"{BACKEND_COLOR}{name}{RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname, record.name = levelname, name


def _supports_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_colored_logging(
    level: Union[int, str] = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    use_colors: bool = True,
) -> None:
    """
    Configure the root logger with a single colored console handler.

    Call this once, early, before the first log record is emitted. Uvicorn's
    own loggers are routed through the same handler.

    Args:
        level: Logging level, as an int or a level name such as "DEBUG".
        format_string: Custom format string.
        date_format: Custom date format string.
        use_colors: Whether to use colors (auto-disabled for non-TTY output).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    stream = sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(
        ColoredFormatter(
            fmt=format_string or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
            use_colors=use_colors,
            stream=stream,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
