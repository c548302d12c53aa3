"""Logging configuration using Loguru.

This module provides:
- Structured JSON logging for production
- Human-readable colorized output for development
- Request-scoped correlation fields (request_id, user_id) via context
- Interception of standard library logging (uvicorn, asyncpg, httpx)
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

import orjson
from loguru import logger


if TYPE_CHECKING:
    from typing import Any


# Request-scoped fields merged into every record
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

_NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncpg",
    "httpx",
    "httpcore",
    "asyncio",
)


class InterceptHandler(logging.Handler):
    """Redirect standard library log records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record by forwarding to Loguru."""
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _format_record(record: dict[str, Any]) -> str:
    """Serialize a record, with request context, as a single JSON line."""
    record["extra"].update(_log_context.get())

    payload = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        **record["extra"],
    }

    if record["exception"]:
        exc_type, exc_value, _ = record["exception"]
        payload["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "value": str(exc_value) if exc_value else None,
        }

    # Loguru treats the returned string as a template; escape braces
    line = orjson.dumps(payload, default=str).decode()
    return line.replace("{", "{{").replace("}", "}}") + "\n"


def _format_record_dev(record: dict[str, Any]) -> str:
    """Format log record for development (human-readable with context)."""
    context = {**_log_context.get(), **record["extra"]}
    context.pop("name", None)

    context_str = ""
    if context:
        parts = " ".join(f"{k}={v}" for k, v in context.items())
        context_str = " | " + parts.replace("{", "{{").replace("}", "}}")

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
        f"{context_str} - "
        "<level>{message}</level>\n"
    )

    if record["exception"]:
        fmt += "{exception}\n"

    return fmt


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    *,
    is_development: bool = False,
) -> None:
    """Configure Loguru logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "text")
        is_development: Enable development-friendly formatting
    """
    logger.remove()

    if log_format == "json" and not is_development:
        logger.add(
            sys.stdout,
            format=_format_record,
            level=log_level.upper(),
            colorize=False,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=_format_record_dev,
            level=log_level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> "logger":  # type: ignore[valid-type]
    """Get a logger instance bound to a name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A Loguru logger instance
    """
    return logger.bind(name=name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields that every subsequent record in this async context carries.

    Example:
        bind_context(request_id="abc-123", user_id=42)
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_context() -> None:
    """Clear all context variables (start of each request)."""
    _log_context.set({})


def get_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
]
