"""
Structured JSON Logging
-----------------------
Glue between this package and the stdlib `logging` engine. Every record is
one JSON object on one line, shaped for Cloud Logging ingestion.

Fields emitted on every record:
  - timestamp   RFC 3339, UTC, nanosecond precision
  - severity    Cloud Logging LogSeverity name
  - message     human-readable text
  - **fields    everything bound to the Entry that emitted the record

The engine owns level filtering, the sink and write locking. This module
only decides how a record looks and how fields travel with it.
"""

import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Mapping, TextIO

from sdl.core.errors import ConfigError


class Level(IntEnum):
    # Aligned with stdlib numeric levels so the engine can filter on them.
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL
    PANIC = 60


_LEVEL_NAMES: dict[str, Level] = {
    "trace": Level.TRACE,
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARNING,
    "warning": Level.WARNING,
    "error": Level.ERROR,
    "fatal": Level.FATAL,
    "panic": Level.PANIC,
}

# https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry#logseverity
_SEVERITY: dict[int, str] = {
    Level.TRACE: "DEBUG",
    Level.DEBUG: "DEBUG",
    Level.INFO: "INFO",
    Level.WARNING: "WARNING",
    Level.ERROR: "ERROR",
    Level.FATAL: "CRITICAL",
    Level.PANIC: "EMERGENCY",
}

# Record attributes used to carry data from Entry to JSONFormatter.
_FIELDS_ATTR = "sdl_fields"
_TIME_ATTR = "sdl_time_ns"


def parse_level(name: str) -> Level:
    """Case-insensitive level lookup. Raises ConfigError for unknown names."""
    try:
        return _LEVEL_NAMES[name.lower()]
    except (KeyError, AttributeError):
        raise ConfigError(f"not a valid logging level: {name!r}") from None


def render(value: object) -> str:
    """str(value), or a placeholder when its __str__ raises."""
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def stack_trace(err: object) -> str:
    """
    The error text followed by the stack of the caller.

    The stack is captured here, where the error is logged, not where it was
    raised. Error Reporting groups on the first line, so the text leads.
    """
    stack = "".join(traceback.format_stack()[:-1])
    return f"{render(err)}\n{stack}"


def format_timestamp(ns: int) -> str:
    """Render epoch nanoseconds as RFC 3339 UTC, trailing zeros trimmed."""
    seconds, nanos = divmod(ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{nanos:09d}".rstrip("0")
    if fraction:
        stamp = f"{stamp}.{fraction}"
    return stamp + "Z"


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        time_ns = getattr(record, _TIME_ATTR, None)
        if time_ns is None:
            time_ns = int(record.created * 1_000_000_000)

        payload: dict[str, Any] = {
            "timestamp": format_timestamp(time_ns),
            "severity": _SEVERITY.get(record.levelno, record.levelname),
            "message": record.getMessage(),
        }

        # Bound fields go on top; a caller may overwrite the keys above.
        payload.update(getattr(record, _FIELDS_ATTR, {}))

        return json.dumps(payload, default=str)


def build_engine(name: str, level: Level, stream: TextIO | None = None) -> logging.Logger:
    """
    Create a logging.Logger that is private to its owner.

    The logger is not registered with logging.getLogger(), so two owners
    with the same name never share handlers or levels.
    """
    engine = logging.Logger(name)
    engine.setLevel(level)
    engine.propagate = False

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JSONFormatter())
    engine.addHandler(handler)
    return engine


class Entry:
    """
    A logging.Logger plus a set of bound fields.

    Entries are never mutated: with_fields() returns a new one, so an Entry
    can be shared between threads and requests.
    """

    def __init__(self, engine: logging.Logger, fields: Mapping[str, Any] | None = None):
        self._engine = engine
        self._fields: dict[str, Any] = dict(fields or {})

    @property
    def engine(self) -> logging.Logger:
        return self._engine

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def with_fields(self, fields: Mapping[str, Any]) -> "Entry":
        return Entry(self._engine, {**self._fields, **fields})

    def log(self, level: int, *args: Any) -> None:
        if not self._engine.isEnabledFor(level):
            return
        self._engine.log(
            level,
            " ".join(render(arg) for arg in args),
            extra={_FIELDS_ATTR: self._fields, _TIME_ATTR: time.time_ns()},
        )

    def trace(self, *args: Any) -> None:
        self.log(Level.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def warning(self, *args: Any) -> None:
        self.log(Level.WARNING, *args)

    warn = warning

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    # fatal and panic are severities only: they never exit or raise.
    def fatal(self, *args: Any) -> None:
        self.log(Level.FATAL, *args)

    def panic(self, *args: Any) -> None:
        self.log(Level.PANIC, *args)
