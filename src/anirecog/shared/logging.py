"""Logging setup for anirecog.

Library modules only create ``logging.getLogger(__name__)`` loggers and
never configure handlers. Applications (the CLI included) call
``setup_structured_logger`` once: it attaches a Rich console handler, or a
JSON-lines stream, and optionally a JSON-lines log file to the package
logger.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import orjson
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from anirecog.shared.constants import Application, LogConfig

# ``extra`` fields copied into JSON log lines when present on a record
STRUCTURED_FIELDS: tuple[str, ...] = (
    "operation",
    "duration_ms",
    "result_info",
    "error",
    "context",
)

_CONSOLE_THEME = Theme(
    {
        "logging.level.debug": "cyan",
        "logging.level.info": "green",
        "logging.level.warning": "yellow",
        "logging.level.error": "red bold",
        "log.time": "dim cyan",
        "log.path": "dim blue",
    }
)


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return orjson.dumps(entry, default=str).decode("utf-8")


def setup_structured_logger(
    name: str = Application.LOGGER_NAME,
    level: str = "INFO",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """Configure the package logger, replacing handlers of a previous call.

    Args:
        name: Logger name (default: "anirecog")
        level: Level name, case-insensitive
        log_file: Also write JSON lines to this file
        use_rich_console: Rich console on stderr instead of JSON lines

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
        old_handler.close()

    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    console_handler: logging.Handler
    if use_rich_console:
        console_handler = RichHandler(
            console=Console(theme=_CONSOLE_THEME, stderr=True),
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%H:%M:%S]",
        )
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding=LogConfig.DEFAULT_ENCODING)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
) -> None:
    """Record a finished operation, its duration and a summary at debug level."""
    logger.debug(
        "%s finished in %.1f ms",
        operation,
        duration_ms,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
        },
    )
