"""Logging utilities for the database setup tool.

This module provides centralised logging configuration and helpers for
structured, contextual logging throughout the project. Log records always go
to the *current* ``sys.stderr`` so the human-readable console output on
stdout stays clean.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator


# ---------------------------------------------------------------------------
# Context variables for structured logging
# ---------------------------------------------------------------------------

_log_context: ContextVar[dict[str, Any]] = ContextVar(
    "log_context", default={})

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ContextualFormatter(logging.Formatter):
    """Formatter that appends context fields to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = _log_context.get()
        if ctx:
            ctx_str = " ".join(f"{k}={v}" for k, v in ctx.items())
            # copy, other handlers must see the original message
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"{record.msg} [{ctx_str}]"
        return super().format(record)


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        logging.Handler.__init__(self, level)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Temporarily add context fields to all log messages.

    Usage::

        with log_context(database="pulsechain_explorer"):
            logger.info("Checking catalog")  # message includes context

    Fields are merged with any existing context and restored on exit.
    """
    current = _log_context.get()
    merged = {**current, **fields}
    token = _log_context.set(merged)
    try:
        yield
    finally:
        _log_context.reset(token)


# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

_configured = False


def configure_logging(
    level: int = logging.WARNING,
    third_party_level: int = logging.WARNING,
) -> None:
    """Configure application-wide logging.

    Call this once at startup (the CLI group does it) to set up consistent
    logging across the application. Later calls only adjust the level of the
    application loggers, so ``--verbose`` still works when the group is
    invoked repeatedly in one process.

    Args:
        level: Log level for application loggers (default WARNING, since
            progress is already reported on the console).
        third_party_level: Log level for the database driver (default WARNING).
    """
    global _configured
    logging.getLogger("pulsechain_db").setLevel(level)
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = StderrHandler()
    handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root.addHandler(handler)

    # Quieten the driver, it logs every connection attempt at DEBUG
    for name in ("psycopg", "psycopg.pool", "asyncio"):
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given name.

    Until configure_logging() runs, warnings and errors still reach stderr
    through the logging module's last-resort handler.

    Args:
        name: Name of the logger (typically __name__).

    Returns:
        A logging.Logger instance.
    """
    return logging.getLogger(name)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log an exception, with its traceback, and optional context fields.

    Args:
        logger: Logger instance.
        message: Human-readable message describing the error.
        exc: The exception that was raised.
        **context: Additional context fields to include.
    """
    with log_context(**context):
        logger.error(f"{message}: {exc}", exc_info=exc)
