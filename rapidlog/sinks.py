"""Sinks: destinations that formatted log messages are written to."""

from __future__ import annotations

import os
import sys
import threading
from abc import ABC, abstractmethod
from typing import TextIO

from rapidlog.common import Level, LogMessage
from rapidlog.file_helper import FileHelper
from rapidlog.pattern import Formatter, PatternFormatter

_CONSOLE_LOCK = threading.RLock()


class Sink(ABC):
    """Base of all sinks: holds a level, a formatter and a lock.

    Subclasses implement ``_sink_it`` and ``_flush``; the public methods take
    the lock around them.
    """

    def __init__(self) -> None:
        self._level = Level.TRACE
        self._formatter: Formatter = PatternFormatter()
        self._lock = threading.RLock()

    def log(self, msg: LogMessage) -> None:
        with self._lock:
            self._sink_it(msg)

    def flush(self) -> None:
        with self._lock:
            self._flush()

    def set_pattern(self, pattern: str) -> None:
        self.set_formatter(PatternFormatter(pattern))

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._formatter = formatter

    def should_log(self, level: Level) -> bool:
        return level >= self._level

    def set_level(self, level: Level) -> None:
        self._level = Level(level)

    @abstractmethod
    def _sink_it(self, msg: LogMessage) -> None:
        """Write one message; called with the lock held."""

    @abstractmethod
    def _flush(self) -> None:
        """Flush buffered output; called with the lock held."""


class BasicFileSink(Sink):
    """Writes every message to a single file."""

    def __init__(self, filename: str | os.PathLike[str], truncate: bool = False) -> None:
        super().__init__()
        self._file_helper = FileHelper()
        self._file_helper.open(filename, truncate)

    def filename(self) -> str:
        return self._file_helper.filename()

    def _sink_it(self, msg: LogMessage) -> None:
        self._file_helper.write(self._formatter.format(msg).text)

    def _flush(self) -> None:
        self._file_helper.flush()


class StreamSink(Sink):
    """Writes every message to a text stream."""

    _flush_every_message = False

    def __init__(self, stream: TextIO) -> None:
        super().__init__()
        self._stream = stream

    def _sink_it(self, msg: LogMessage) -> None:
        self._stream.write(self._formatter.format(msg).text)
        if self._flush_every_message:
            self._stream.flush()

    def _flush(self) -> None:
        self._stream.flush()


class StdoutSink(StreamSink):
    """Writes to standard output, flushing after each message."""

    _flush_every_message = True

    def __init__(self) -> None:
        super().__init__(sys.stdout)
        self._lock = _CONSOLE_LOCK


class StderrSink(StreamSink):
    """Writes to standard error, flushing after each message."""

    _flush_every_message = True

    def __init__(self) -> None:
        super().__init__(sys.stderr)
        self._lock = _CONSOLE_LOCK