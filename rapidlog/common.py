"""Core types shared across the logging library: levels, errors and messages."""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum

VER_MAJOR = 1
VER_MINOR = 4
VER_PATCH = 0


def version_number() -> int:
    """Return the library version packed as major*10000 + minor*100 + patch."""
    return VER_MAJOR * 10000 + VER_MINOR * 100 + VER_PATCH


class Level(IntEnum):
    """Severity levels, ordered from most to least verbose."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERR = 4
    CRITICAL = 5
    OFF = 6


_LEVEL_NAMES = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERR: "error",
    Level.CRITICAL: "critical",
    Level.OFF: "off",
}

_SHORT_LEVEL_NAMES = {
    Level.TRACE: "T",
    Level.DEBUG: "D",
    Level.INFO: "I",
    Level.WARN: "W",
    Level.ERR: "E",
    Level.CRITICAL: "C",
    Level.OFF: "O",
}

_LEVELS_BY_NAME = {name: level for level, name in _LEVEL_NAMES.items()}


def to_string_view(level: Level) -> str:
    """Return the full name of a level, e.g. ``"warning"``."""
    return _LEVEL_NAMES[Level(level)]


def to_short_name(level: Level) -> str:
    """Return the one-letter name of a level, e.g. ``"W"``."""
    return _SHORT_LEVEL_NAMES[Level(level)]


def from_str(name: str) -> Level:
    """Look a level up by its full name; unknown names map to ``Level.OFF``."""
    return _LEVELS_BY_NAME.get(name, Level.OFF)


class SpdlogError(Exception):
    """Error raised by the logging library itself."""

    def __init__(self, msg: str, last_errno: int | None = None) -> None:
        self.errno = last_errno
        if last_errno is not None:
            msg = f"{msg}: {os.strerror(last_errno)}"
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


@dataclass(frozen=True)
class SourceLoc:
    """Location in the calling code that produced a log message."""

    filename: str = ""
    line: int = 0
    funcname: str = ""

    def empty(self) -> bool:
        """True when no source location is known."""
        return self.line == 0


@dataclass
class LogMessage:
    """A single log record as it travels from a logger to its sinks."""

    logger_name: str
    level: Level
    payload: str
    source: SourceLoc = field(default_factory=SourceLoc)
    time: float = field(default_factory=time.time)
    thread_id: int = field(default_factory=threading.get_ident)