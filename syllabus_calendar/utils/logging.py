"""
Logging for the syllabus calendar pipeline.

Console output goes through Rich on stderr; an optional file handler writes
one JSON object per record. Per-request fields (the model being tried, the
operation being timed) live in a context variable, so concurrent pipelines
each log their own values.
"""

import functools
import inspect
import json
import logging
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from syllabus_calendar.config import get_settings

# Attributes every LogRecord has; anything else came in through ``extra`` or the context
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, extra and context fields included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Copy the current log context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


context_filter = ContextFilter()


def setup_logging(
    log_level: Optional[str] = None,
    log_file_path: Optional[Path] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (defaults to settings)
        log_file_path: JSON log file (defaults to settings; none if unset)
    """
    settings = get_settings()
    log_level = log_level or settings.log_level
    log_file_path = log_file_path or settings.get_log_file_path()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=settings.dev_mode,
    )
    console_handler.addFilter(context_filter)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    # Request-level chatter from the HTTP stack
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={"log_level": log_level, "log_file": str(log_file_path) if log_file_path else None},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Add fields to every record logged inside the block.

    Usage:
        with LogContext(model="gpt-4"):
            logger.info("Calling model")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set({**_log_context.get(), **self.fields})
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _log_context.reset(self._token)


def log_performance(func):
    """
    Time an async function at DEBUG level, tagging its records with ``operation``.

    Usage:
        @log_performance
        async def extract_text(self, data: bytes) -> DocumentText:
            ...
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"log_performance expects a coroutine function, got {func.__qualname__}")

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        with LogContext(operation=func.__name__):
            logger.debug(f"Starting {func.__name__}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.debug(
                    f"Failed {func.__name__}",
                    extra={"duration_seconds": time.perf_counter() - start_time, "error": str(e)},
                )
                raise
            logger.debug(
                f"Completed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time},
            )
            return result

    return wrapper
