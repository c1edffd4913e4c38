"""Centralized logging configuration for the finance engine."""

import json
import logging
import logging.handlers
import os
from pathlib import Path
from typing import List, Optional

from agency_finance.utils.logging_utils import _ContextFilter

# LogRecord attributes that are not structured context fields
_RECORD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter carrying context fields such as project_id."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_FIELDS and not key.startswith("_"):
                log_data[key] = value

        # Decimal amounts and datetimes are rendered as strings
        return json.dumps(log_data, default=str)


# Rotation of the log file
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class LoggingConfig:
    """
    Where and how the engine's log records are written.

    A file handler is added only when ``log_file`` is set; the file rotates
    at LOG_FILE_MAX_BYTES keeping LOG_FILE_BACKUPS old files.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: 'standard' text lines or 'json' records with context fields
        log_file: Path of the log file (optional)
        enable_console: Write records to stderr
    """

    VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    VALID_FORMATS = ("standard", "json")

    def __init__(
        self,
        log_level: str = "INFO",
        log_format: str = "standard",
        log_file: Optional[str] = None,
        enable_console: bool = True,
    ):
        level = log_level.upper()
        if level not in self.VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {log_level}. Must be one of {', '.join(self.VALID_LEVELS)}"
            )
        if log_format not in self.VALID_FORMATS:
            raise ValueError(
                f"Invalid log format: {log_format}. Must be one of {', '.join(self.VALID_FORMATS)}"
            )

        self.log_level = level
        self.log_format = log_format
        self.log_file = log_file or None
        self.enable_console = enable_console

    @property
    def level_number(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """
        Build the configuration the CLI uses from LOG_LEVEL, LOG_FORMAT,
        LOG_FILE and LOG_CONSOLE ("false" silences stderr).
        """
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            log_file=os.getenv("LOG_FILE"),
            enable_console=os.getenv("LOG_CONSOLE", "true").lower() != "false",
        )


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONFormatter()
    return logging.Formatter(fmt=_STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def configure_logging(config: LoggingConfig) -> None:
    """
    Replace the root handlers with the ones described by ``config``.

    Every handler carries the LogContext filter, so structured fields such
    as project_id reach both console and file output.
    """
    reset_logging()
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level_number)

    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(logging.StreamHandler())
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=config.log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
            )
        )

    formatter = _build_formatter(config.log_format)
    context_filter = _ContextFilter()
    for handler in handlers:
        handler.setLevel(config.level_number)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)


def reset_logging() -> None:
    """Remove and close all root handlers and restore the WARNING level."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(logging.WARNING)
