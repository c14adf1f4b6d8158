"""Pattern-driven formatting of log messages into text."""

from __future__ import annotations

import math
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from rapidlog.common import LogMessage, to_short_name, to_string_view

DEFAULT_EOL = "\n"
DEFAULT_PATTERN = "%+"
MAX_PADDING_WIDTH = 64

_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_FULL_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
_FULL_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_TOKEN_RE = re.compile(r"%(?P<side>[-=]?)(?P<width>\d*)(?P<flag>.)?|(?P<text>[^%]+)", re.DOTALL)


def pad2(n: int) -> str:
    """Write ``n`` with at least two digits."""
    return f"{n:02d}" if 0 <= n < 100 else str(n)


def pad3(n: int) -> str:
    """Write ``n`` with at least three digits."""
    return f"{n:03d}"


def pad6(n: int) -> str:
    """Write ``n`` with at least six digits."""
    return f"{n:06d}"


def pad9(n: int) -> str:
    """Write ``n`` with at least nine digits."""
    return f"{n:09d}"


class PadSide(Enum):
    """Side on which padding is added to a field."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


@dataclass(frozen=True)
class PaddingInfo:
    """Requested width and padding side of one pattern field."""

    width: int = 0
    side: PadSide = PadSide.LEFT

    def enabled(self) -> bool:
        return self.width != 0

    def apply(self, text: str) -> str:
        missing = self.width - len(text)
        if missing <= 0:
            return text
        if self.side is PadSide.LEFT:
            return " " * missing + text
        if self.side is PadSide.RIGHT:
            return text + " " * missing
        half = missing // 2
        return " " * half + text + " " * (missing - half)


class TimeType(Enum):
    """Whether timestamps are shown in local time or UTC."""

    LOCAL = "local"
    UTC = "utc"


@dataclass(frozen=True)
class FormattedRecord:
    """Formatted text of a message and the span a color sink should color."""

    text: str
    color_range_start: int = 0
    color_range_end: int = 0

    def __str__(self) -> str:
        return self.text


class Formatter(ABC):
    """Turns a log message into text."""

    @abstractmethod
    def format(self, msg: LogMessage) -> FormattedRecord:
        """Format one message."""

    @abstractmethod
    def clone(self) -> Formatter:
        """Return an independent formatter that behaves the same."""


@dataclass(frozen=True)
class _TimeInfo:
    tm: time.struct_time
    seconds: int
    micros: int


class _Mark(Enum):
    COLOR_START = "color_start"
    COLOR_END = "color_end"


_FieldFn = Callable[[LogMessage, _TimeInfo], str]
_Item = Union[str, _Mark, _FieldFn]


def _hour12(tm: time.struct_time) -> int:
    hour = tm.tm_hour % 12
    return hour if hour else 12


def _ampm(tm: time.struct_time) -> str:
    return "AM" if tm.tm_hour < 12 else "PM"


def _utc_offset(tm: time.struct_time) -> str:
    offset = (tm.tm_gmtoff or 0) // 60
    sign = "-" if offset < 0 else "+"
    hours, minutes = divmod(abs(offset), 60)
    return f"{sign}{pad2(hours)}:{pad2(minutes)}"


def _datetime(tm: time.struct_time) -> str:
    return (
        f"{_WEEKDAYS[tm.tm_wday]} {_MONTHS[tm.tm_mon - 1]} {pad2(tm.tm_mday)} "
        f"{pad2(tm.tm_hour)}:{pad2(tm.tm_min)}:{pad2(tm.tm_sec)} {tm.tm_year}"
    )


def _source_location(msg: LogMessage) -> str:
    if msg.source.empty():
        return ""
    return f"{msg.source.filename}:{msg.source.line}"


def _short_filename(msg: LogMessage) -> str:
    return "" if msg.source.empty() else os.path.basename(msg.source.filename)


_FLAGS: dict[str, _FieldFn] = {
    "v": lambda m, t: m.payload,
    "n": lambda m, t: m.logger_name,
    "l": lambda m, t: to_string_view(m.level),
    "L": lambda m, t: to_short_name(m.level),
    "t": lambda m, t: str(m.thread_id),
    "P": lambda m, t: str(os.getpid()),
    "a": lambda m, t: _WEEKDAYS[t.tm.tm_wday],
    "A": lambda m, t: _FULL_WEEKDAYS[t.tm.tm_wday],
    "b": lambda m, t: _MONTHS[t.tm.tm_mon - 1],
    "h": lambda m, t: _MONTHS[t.tm.tm_mon - 1],
    "B": lambda m, t: _FULL_MONTHS[t.tm.tm_mon - 1],
    "c": lambda m, t: _datetime(t.tm),
    "C": lambda m, t: pad2(t.tm.tm_year % 100),
    "Y": lambda m, t: str(t.tm.tm_year),
    "D": lambda m, t: f"{pad2(t.tm.tm_mon)}/{pad2(t.tm.tm_mday)}/{pad2(t.tm.tm_year % 100)}",
    "x": lambda m, t: f"{pad2(t.tm.tm_mon)}/{pad2(t.tm.tm_mday)}/{pad2(t.tm.tm_year % 100)}",
    "m": lambda m, t: pad2(t.tm.tm_mon),
    "d": lambda m, t: pad2(t.tm.tm_mday),
    "H": lambda m, t: pad2(t.tm.tm_hour),
    "I": lambda m, t: pad2(_hour12(t.tm)),
    "M": lambda m, t: pad2(t.tm.tm_min),
    "S": lambda m, t: pad2(t.tm.tm_sec),
    "e": lambda m, t: pad3(t.micros // 1000),
    "f": lambda m, t: pad6(t.micros),
    "F": lambda m, t: pad9(t.micros * 1000),
    "E": lambda m, t: str(t.seconds),
    "p": lambda m, t: _ampm(t.tm),
    "r": lambda m, t: f"{pad2(_hour12(t.tm))}:{pad2(t.tm.tm_min)}:{pad2(t.tm.tm_sec)} {_ampm(t.tm)}",
    "R": lambda m, t: f"{pad2(t.tm.tm_hour)}:{pad2(t.tm.tm_min)}",
    "T": lambda m, t: f"{pad2(t.tm.tm_hour)}:{pad2(t.tm.tm_min)}:{pad2(t.tm.tm_sec)}",
    "X": lambda m, t: f"{pad2(t.tm.tm_hour)}:{pad2(t.tm.tm_min)}:{pad2(t.tm.tm_sec)}",
    "z": lambda m, t: _utc_offset(t.tm),
    "@": lambda m, t: _source_location(m),
    "s": lambda m, t: _short_filename(m),
    "g": lambda m, t: "" if m.source.empty() else m.source.filename,
    "#": lambda m, t: "" if m.source.empty() else str(m.source.line),
    "!": lambda m, t: "" if m.source.empty() else m.source.funcname,
}


def _padded(fn: _FieldFn, padding: PaddingInfo) -> _FieldFn:
    if not padding.enabled():
        return fn
    return lambda msg, tinfo: padding.apply(fn(msg, tinfo))


def _tokenize(pattern: str) -> list[_Item]:
    items: list[_Item] = []
    for match in _TOKEN_RE.finditer(pattern):
        if match["text"] is not None:
            items.append(match["text"])
            continue
        flag = match["flag"]
        if flag is None:
            continue
        side = {"-": PadSide.RIGHT, "=": PadSide.CENTER}.get(match["side"], PadSide.LEFT)
        width = min(int(match["width"]), MAX_PADDING_WIDTH) if match["width"] else 0
        padding = PaddingInfo(width, side)
        if flag == "+":
            items.extend(_full_items())
        elif flag == "^":
            items.append(_Mark.COLOR_START)
        elif flag == "$":
            items.append(_Mark.COLOR_END)
        elif flag == "%":
            items.append("%")
        elif flag in _FLAGS:
            items.append(_padded(_FLAGS[flag], padding))
        else:
            items.append("%" + flag)
    return _merge_literals(items)


def _full_items() -> list[_Item]:
    return [
        *_tokenize("[%Y-%m-%d %H:%M:%S.%e] "),
        lambda m, t: f"[{m.logger_name}] " if m.logger_name else "",
        "[",
        _Mark.COLOR_START,
        _FLAGS["l"],
        _Mark.COLOR_END,
        "] ",
        lambda m, t: "" if m.source.empty() else f"[{_short_filename(m)}:{m.source.line}] ",
        _FLAGS["v"],
    ]


def _merge_literals(items: list[_Item]) -> list[_Item]:
    merged: list[_Item] = []
    for item in items:
        if isinstance(item, str) and merged and isinstance(merged[-1], str):
            merged[-1] += item
        else:
            merged.append(item)
    return merged


class PatternFormatter(Formatter):
    """Formats messages according to a ``%``-flag pattern such as ``"[%l] %v"``."""

    def __init__(
        self,
        pattern: str = DEFAULT_PATTERN,
        time_type: TimeType = TimeType.LOCAL,
        eol: str = DEFAULT_EOL,
    ) -> None:
        self.pattern = pattern
        self.time_type = time_type
        self.eol = eol
        self._items = _tokenize(pattern)
        self._cached: tuple[int, time.struct_time] | None = None

    def _time_info(self, msg: LogMessage) -> _TimeInfo:
        seconds = math.floor(msg.time)
        micros = round((msg.time - seconds) * 1_000_000)
        if micros >= 1_000_000:
            seconds += 1
            micros -= 1_000_000
        if self._cached is None or self._cached[0] != seconds:
            convert = time.gmtime if self.time_type is TimeType.UTC else time.localtime
            self._cached = (seconds, convert(seconds))
        return _TimeInfo(self._cached[1], seconds, micros)

    def format(self, msg: LogMessage) -> FormattedRecord:
        tinfo = self._time_info(msg)
        parts: list[str] = []
        length = color_start = color_end = 0
        for item in self._items:
            if item is _Mark.COLOR_START:
                color_start = length
            elif item is _Mark.COLOR_END:
                color_end = length
            else:
                text = item if isinstance(item, str) else item(msg, tinfo)
                parts.append(text)
                length += len(text)
        parts.append(self.eol)
        return FormattedRecord("".join(parts), color_start, color_end)

    def clone(self) -> PatternFormatter:
        return PatternFormatter(self.pattern, self.time_type, self.eol)