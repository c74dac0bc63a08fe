"""Centralized logging helpers.

Every module logs through ``logging.getLogger(__name__)``. Structured fields
are attached with ``extra=extra_context(...)`` and rendered by
``ContextFormatter`` after the message, so DEBUG traces stay greppable
without a JSON log pipeline.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

# Keys recognised by extra_context and rendered by ContextFormatter, in order.
CONTEXT_KEYS = (
    "event",
    "component",
    "action",
    "outcome",
    "target",
    "bundle",
    "entry",
    "count",
    "duration_ms",
)

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for a log call, dropping unset fields."""
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)


class ContextFormatter(logging.Formatter):
    """Formatter appending structured context fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) is not None
        ]
        if not pairs:
            return base
        return f"{base} [{' '.join(pairs)}]"


def _resolve_level(raw: Optional[str]) -> int:
    name = (raw or "INFO").strip().upper()
    if name not in _LEVELS:
        return logging.INFO
    return getattr(logging, name)


def configure_logging() -> None:
    """Configure the root logger from the environment.

    ``SHADEDIFF_LOG_LEVEL`` selects the level (default INFO) and
    ``SHADEDIFF_LOG_FILE``, when set, sends records to that file instead of
    stderr. Calling this again replaces the handler installed by the previous
    call and leaves handlers installed by others alone.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_shadediff", False):
            root.removeHandler(existing)
            existing.close()

    log_file = os.environ.get(Constants.ENV_LOG_FILE)
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter(Constants.LOG_FORMAT))
    handler._shadediff = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(_resolve_level(os.environ.get(Constants.ENV_LOG_LEVEL)))
