"""
Centralized logging configuration for the weekly digest.

Provides:
- Human-readable console logging (default)
- JSON structured console logging for scheduled/CI runs (--json-logs)
- Optional JSON log file alongside the console output (--log-file)

Usage:
    from weekly_digest.core.logging_config import get_logger, log_with_context

    logger = get_logger(__name__)
    log_with_context(logger, "info", "Aggregated metrics", model_count=42)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that drown out the digest's own messages below WARNING
QUIET_LOGGERS = ("smtplib",)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's UTC creation time."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(getattr(record, "extra_fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Console formatter that colors the level name on a terminal."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname)
        if color and sys.stderr.isatty():
            # Copy so other handlers still see the plain level name
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _console_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JSONFormatter()
    return ContextFormatter(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_output: bool = False,
) -> None:
    """
    Configure the root logger for one digest run.

    The console handler writes to stderr; stdout is reserved for the
    confirmation lines. A log file, when given, always receives JSON.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Optional path for a JSON log file (parent dirs are created)
        json_output: Emit JSON on the console too
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setFormatter(_console_formatter(json_output))

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log message with additional context fields.

    Context fields become top-level keys in JSON output and are dropped by
    the console formatter.

    Example:
        log_with_context(logger, "info", "Report rendered", model_count=1200, html_bytes=48211)
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
