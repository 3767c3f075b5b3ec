"""
Console logging: coloured level badges, a SUCCESS level and command lines.
"""

import logging
import sys
from typing import Any

import typer

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVEL_COLORS = {
    logging.DEBUG: typer.colors.BRIGHT_BLACK,
    logging.INFO: typer.colors.BLUE,
    SUCCESS: typer.colors.GREEN,
    logging.WARNING: typer.colors.YELLOW,
    logging.ERROR: typer.colors.RED,
    logging.CRITICAL: typer.colors.BRIGHT_RED,
}


class ConsoleFormatter(logging.Formatter):
    """
    Format records as `[LEVEL] HH:MM:SS [prefix] message`.

    The prefix comes from the record's `prefix` attribute (set by `Logger`).
    """

    def __init__(self, color: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        badge = f"[{record.levelname}]"
        timestamp = self.formatTime(record, self.datefmt)
        if self.color:
            badge = typer.style(badge, fg=LEVEL_COLORS.get(record.levelno), bold=True)
            timestamp = typer.style(timestamp, fg=typer.colors.BRIGHT_BLACK)

        prefix = getattr(record, "prefix", "")
        prefix = f"[{prefix}] " if prefix else ""
        line = f"{badge} {timestamp} {prefix}{record.getMessage()}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str | int = "INFO", color: bool | None = None) -> None:
    """Configure root logging with the console formatter (no-op if already configured)."""
    if color is None:
        color = sys.stderr.isatty()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ConsoleFormatter(color=color))
    logging.basicConfig(
        level=level if isinstance(level, int) else level.upper(),
        handlers=[handler],
    )


class Logger(logging.LoggerAdapter):
    """
    Logger adapter for bots and plugins.

    Adds `success()` and `command()` on top of the standard methods and
    tags every record with an optional prefix.
    """

    def __init__(self, name: str = "kachina", prefix: str = ""):
        super().__init__(logging.getLogger(name), {"prefix": prefix})

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def success(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(SUCCESS, msg, *args, **kwargs)

    def command(self, command: str, sender: str) -> None:
        """Log an executed command and who sent it."""
        self.info("[CMD] %s from %s", command, sender)
