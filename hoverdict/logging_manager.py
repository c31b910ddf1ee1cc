"""Structured JSON logging shared by every hoverdict component.

All components log through children of the ``hoverdict`` logger and tag each
record with an ``event`` name. Lookup-scoped values (the provider id and the
word being resolved) are attached through :func:`log_context` rather than
passed to every call.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, List, Optional

PACKAGE_DIR = Path(__file__).resolve().parent
LOG_DIR = Path(os.environ.get("HOVERDICT_LOG_DIR") or PACKAGE_DIR.parent / "log")
LOG_FILE = LOG_DIR / "hoverdict.log"
LOGGER_NAME = "hoverdict"
DEFAULT_LOG_LEVEL = logging.INFO

_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 5

# Attributes every LogRecord carries; anything else came from ``extra=`` or
# the context filter.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_logger: Optional[logging.Logger] = None
_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "hoverdict_log_context", default={}
)


class JSONLogFormatter(logging.Formatter):
    """Format each record as one JSON object per line.

    Lookup fields listed in :attr:`DEFAULT_FIELDS` are promoted to the top
    level; remaining ``extra=`` attributes are nested under ``"extra"``.
    """

    DEFAULT_FIELDS: tuple[str, ...] = ("event", "provider", "word", "status", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pid": record.process,
            "thread": record.threadName,
        }
        payload.update(
            (name, getattr(record, name))
            for name in self.DEFAULT_FIELDS
            if getattr(record, name, None) is not None
        )

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in self.DEFAULT_FIELDS
        }
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto records that lack them."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _build_handlers(log_file: Path) -> List[logging.Handler]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers: List[logging.Handler] = [
        RotatingFileHandler(log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS),
        logging.StreamHandler(),
    ]
    formatter = JSONLogFormatter()
    context_filter = LogContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
    return handlers


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Attach the JSON handlers to the ``hoverdict`` logger once.

    Later calls only adjust the level.
    """
    global _logger

    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        for handler in _build_handlers(LOG_FILE):
            logger.addHandler(handler)
        _logger = logger

    configure_logging_level(log_level=log_level)
    return _logger


def get_logger() -> logging.Logger:
    """Return the ``hoverdict`` logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Set the logger and handler level from ``log_level`` or the debug flag.

    Returns:
        The level that was applied.
    """
    if log_level is None:
        log_level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return log_level


def get_log_context() -> Dict[str, object]:
    """Return a copy of the values attached to records logged right now."""
    return dict(_context.get())


def push_log_context(**values: object) -> contextvars.Token[Dict[str, object]]:
    """Add ``values`` (ignoring ``None``) to the log context.

    Returns:
        Token for :func:`pop_log_context`.
    """
    merged = dict(_context.get())
    merged.update((key, value) for key, value in values.items() if value is not None)
    return _context.set(merged)


def pop_log_context(token: contextvars.Token[Dict[str, object]]) -> None:
    _context.reset(token)


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Scope ``values`` to the records logged inside the ``with`` block."""
    token = push_log_context(**values)
    try:
        yield
    finally:
        pop_log_context(token)


def clear_log_context() -> None:
    _context.set({})


logger = get_logger()
