"""The logger: filters messages by level and hands them to its sinks."""

from __future__ import annotations

import copy
import sys
import threading
import time
from collections.abc import Iterable
from typing import Any, Callable

from rapidlog.common import Level, LogMessage
from rapidlog.pattern import Formatter, PatternFormatter, TimeType
from rapidlog.sinks import Sink

ErrorHandler = Callable[[str], Any]

_ERR_REPORT_INTERVAL = 60.0


class _DefaultErrorReporter:
    """Prints logging errors to stderr, at most once per interval."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_report: float | None = None

    def report(self, logger_name: str, msg: str) -> None:
        with self._lock:
            now = time.monotonic()
            if self._last_report is not None and now - self._last_report < _ERR_REPORT_INTERVAL:
                return
            self._last_report = now
        date = time.strftime("%Y-%m-%d %H:%M:%S")
        print(f"[*** LOG ERROR ***] [{date}] [{logger_name}] {msg}", file=sys.stderr)


_default_reporter = _DefaultErrorReporter()


class Logger:
    """A named logger writing to a list of sinks.

    Messages below the logger's level are dropped; the rest are passed to each
    sink whose own level accepts them. Errors raised while formatting or
    writing go to the error handler instead of the caller.
    """

    def __init__(self, name: str, sinks: Sink | Iterable[Sink] | None = None) -> None:
        self._name = name
        if sinks is None:
            self._sinks: list[Sink] = []
        elif isinstance(sinks, Sink):
            self._sinks = [sinks]
        else:
            self._sinks = list(sinks)
        self._level = self.default_level()
        self._flush_level = Level.OFF
        self._custom_err_handler: ErrorHandler | None = None

    def __repr__(self) -> str:
        return f"Logger({self._name!r}, level={self._level.name})"

    def log(self, level: Level, msg: Any, *args: Any) -> None:
        """Log ``msg`` at ``level``; with ``args`` it is a ``str.format`` template."""
        level = Level(level)
        if not self.should_log(level):
            return
        try:
            if args:
                payload = str(msg).format(*args)
            elif isinstance(msg, str):
                payload = msg
            else:
                payload = format(msg)
            self._sink_it(LogMessage(self._name, level, payload))
        except Exception as ex:
            self._err_handler(str(ex) or type(ex).__name__)

    def trace(self, msg: Any, *args: Any) -> None:
        self.log(Level.TRACE, msg, *args)

    def debug(self, msg: Any, *args: Any) -> None:
        self.log(Level.DEBUG, msg, *args)

    def info(self, msg: Any, *args: Any) -> None:
        self.log(Level.INFO, msg, *args)

    def warn(self, msg: Any, *args: Any) -> None:
        self.log(Level.WARN, msg, *args)

    def error(self, msg: Any, *args: Any) -> None:
        self.log(Level.ERR, msg, *args)

    def critical(self, msg: Any, *args: Any) -> None:
        self.log(Level.CRITICAL, msg, *args)

    def should_log(self, level: Level) -> bool:
        return level >= self._level

    def set_level(self, level: Level) -> None:
        self._level = Level(level)

    @staticmethod
    def default_level() -> Level:
        return Level.INFO

    def level(self) -> Level:
        return self._level

    def name(self) -> str:
        return self._name

    def set_formatter(self, formatter: Formatter) -> None:
        """Give each sink its own copy of ``formatter``."""
        for sink in self._sinks[:-1]:
            sink.set_formatter(formatter.clone())
        if self._sinks:
            self._sinks[-1].set_formatter(formatter)

    def set_pattern(self, pattern: str, time_type: TimeType = TimeType.LOCAL) -> None:
        self.set_formatter(PatternFormatter(pattern, time_type))

    def flush(self) -> None:
        try:
            self._flush()
        except Exception as ex:
            self._err_handler(str(ex) or type(ex).__name__)

    def flush_on(self, level: Level) -> None:
        """Flush automatically after any message at ``level`` or above."""
        self._flush_level = Level(level)

    def flush_level(self) -> Level:
        return self._flush_level

    def sinks(self) -> list[Sink]:
        """The logger's sink list itself; changes to it take effect."""
        return self._sinks

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        self._custom_err_handler = handler

    def clone(self, name: str) -> Logger:
        """A new logger with the given name sharing these sinks and settings."""
        cloned = copy.copy(self)
        cloned._name = name
        cloned._sinks = list(self._sinks)
        return cloned

    def _sink_it(self, msg: LogMessage) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                sink.log(msg)
        if self._should_flush(msg):
            self._flush()

    def _flush(self) -> None:
        for sink in self._sinks:
            sink.flush()

    def _should_flush(self, msg: LogMessage) -> bool:
        return msg.level >= self._flush_level and msg.level != Level.OFF

    def _err_handler(self, msg: str) -> None:
        if self._custom_err_handler is not None:
            self._custom_err_handler(msg)
        else:
            _default_reporter.report(self._name, msg)