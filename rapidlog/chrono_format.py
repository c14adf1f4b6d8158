"""Formatting of time durations with strftime-like specifiers."""

from __future__ import annotations

import datetime
from enum import Enum
from fractions import Fraction
from operator import methodcaller
from typing import Any, Callable

_ALIGN_CHARS = "<>^="


class NumericSystem(Enum):
    """How numbers in a duration are written."""

    STANDARD = "standard"
    ALTERNATIVE = "alternative"


_PLAIN_HANDLERS = {
    "a": methodcaller("on_abbr_weekday"),
    "A": methodcaller("on_full_weekday"),
    "b": methodcaller("on_abbr_month"),
    "B": methodcaller("on_full_month"),
    "D": methodcaller("on_us_date"),
    "F": methodcaller("on_iso_date"),
    "r": methodcaller("on_12_hour_time"),
    "R": methodcaller("on_24_hour_time"),
    "T": methodcaller("on_iso_time"),
    "p": methodcaller("on_am_pm"),
    "z": methodcaller("on_utc_offset"),
    "Z": methodcaller("on_tz_name"),
}

_STANDARD_HANDLERS = {
    "w": "on_dec0_weekday",
    "u": "on_dec1_weekday",
    "H": "on_24_hour",
    "I": "on_12_hour",
    "M": "on_minute",
    "S": "on_second",
    "c": "on_datetime",
    "x": "on_loc_date",
    "X": "on_loc_time",
}

_E_HANDLERS = {
    "c": "on_datetime",
    "x": "on_loc_date",
    "X": "on_loc_time",
}

_O_HANDLERS = {
    "w": "on_dec0_weekday",
    "u": "on_dec1_weekday",
    "H": "on_24_hour",
    "I": "on_12_hour",
    "M": "on_minute",
    "S": "on_second",
}


def parse_chrono_format(spec: str, handler: Any) -> int:
    """Walk a chrono format spec, calling ``handler`` for each element.

    Parsing stops at the end of ``spec`` or at the first ``}``. Returns the
    index where parsing stopped. Raises ``ValueError`` on a malformed spec.
    """
    begin = ptr = 0
    end = len(spec)
    while ptr < end:
        char = spec[ptr]
        if char == "}":
            break
        if char != "%":
            ptr += 1
            continue
        if begin != ptr:
            handler.on_text(spec[begin:ptr])
        ptr += 1
        if ptr == end:
            raise ValueError("invalid format")
        char = spec[ptr]
        ptr += 1
        if char == "%":
            handler.on_text("%")
        elif char == "n":
            handler.on_text("\n")
        elif char == "t":
            handler.on_text("\t")
        elif char in _PLAIN_HANDLERS:
            _PLAIN_HANDLERS[char](handler)
        elif char in _STANDARD_HANDLERS:
            getattr(handler, _STANDARD_HANDLERS[char])(NumericSystem.STANDARD)
        elif char in ("E", "O"):
            table = _E_HANDLERS if char == "E" else _O_HANDLERS
            if ptr == end:
                raise ValueError("invalid format")
            modified = spec[ptr]
            ptr += 1
            if modified not in table:
                raise ValueError("invalid format")
            getattr(handler, table[modified])(NumericSystem.ALTERNATIVE)
        else:
            raise ValueError("invalid format")
        begin = ptr
    if begin != ptr:
        handler.on_text(spec[begin:ptr])
    return ptr


def _accepting(name: str) -> Callable[..., None]:
    def method(self: ChronoFormatChecker, *_: Any) -> None:
        self.accepted.append(name)

    method.__name__ = name
    return method


def _rejecting(name: str) -> Callable[..., None]:
    def method(self: ChronoFormatChecker, *_: Any) -> None:
        self.rejected = name
        raise ValueError("no date")

    method.__name__ = name
    return method


class ChronoFormatChecker:
    """Handler that rejects specifiers needing calendar date information."""

    def __init__(self) -> None:
        self.accepted: list[str] = []
        self.rejected: str | None = None

    on_text = _accepting("on_text")
    on_abbr_weekday = _rejecting("on_abbr_weekday")
    on_full_weekday = _rejecting("on_full_weekday")
    on_dec0_weekday = _rejecting("on_dec0_weekday")
    on_dec1_weekday = _rejecting("on_dec1_weekday")
    on_abbr_month = _rejecting("on_abbr_month")
    on_full_month = _rejecting("on_full_month")
    on_24_hour = _accepting("on_24_hour")
    on_12_hour = _accepting("on_12_hour")
    on_minute = _accepting("on_minute")
    on_second = _accepting("on_second")
    on_datetime = _rejecting("on_datetime")
    on_loc_date = _rejecting("on_loc_date")
    on_loc_time = _rejecting("on_loc_time")
    on_us_date = _rejecting("on_us_date")
    on_iso_date = _rejecting("on_iso_date")
    on_12_hour_time = _accepting("on_12_hour_time")
    on_24_hour_time = _accepting("on_24_hour_time")
    on_iso_time = _accepting("on_iso_time")
    on_am_pm = _accepting("on_am_pm")
    on_utc_offset = _rejecting("on_utc_offset")
    on_tz_name = _rejecting("on_tz_name")


def check_chrono_format(spec: str) -> int:
    """Validate a duration spec; return the index where it ends."""
    return parse_chrono_format(spec, ChronoFormatChecker())


def _cdiv(a: int, b: int) -> int:
    quotient = abs(a) // b
    return -quotient if a < 0 else quotient


def _cmod(a: int, b: int) -> int:
    remainder = abs(a) % b
    return -remainder if a < 0 else remainder


def _skipping(name: str) -> Callable[..., None]:
    def method(self: DurationFormatter, *_: Any) -> None:
        self.skipped.append(name)

    method.__name__ = name
    return method


class DurationFormatter:
    """Handler that renders a duration of whole seconds plus milliseconds."""

    def __init__(self, seconds: int, milliseconds: int) -> None:
        self.seconds = seconds
        self.milliseconds = milliseconds
        self.skipped: list[str] = []
        self._parts: list[str] = []

    def result(self) -> str:
        """The text produced so far."""
        return "".join(self._parts)

    def _hour(self) -> int:
        return _cmod(_cdiv(self.seconds, 3600), 24)

    def _hour12(self) -> int:
        hour = _cmod(_cdiv(self.seconds, 3600), 12)
        return hour if hour > 0 else 12

    def _minute(self) -> int:
        return _cmod(_cdiv(self.seconds, 60), 60)

    def _second(self) -> int:
        return _cmod(self.seconds, 60)

    def _write(self, value: int, width: int) -> None:
        if value < 0:
            raise ValueError("negative value")
        self._parts.append(f"{value:0{width}d}")

    def _localized(self, fmt: str, hour: int = 0, minute: int = 0, second: int = 0) -> None:
        for value in (hour, minute, second):
            if value < 0:
                raise ValueError("negative value")
        self._parts.append(datetime.time(hour, minute, second).strftime(fmt))

    def on_text(self, text: str) -> None:
        self._parts.append(text)

    # Durations carry no calendar date, so these produce no text.
    on_abbr_weekday = _skipping("on_abbr_weekday")
    on_full_weekday = _skipping("on_full_weekday")
    on_dec0_weekday = _skipping("on_dec0_weekday")
    on_dec1_weekday = _skipping("on_dec1_weekday")
    on_abbr_month = _skipping("on_abbr_month")
    on_full_month = _skipping("on_full_month")
    on_datetime = _skipping("on_datetime")
    on_loc_date = _skipping("on_loc_date")
    on_loc_time = _skipping("on_loc_time")
    on_us_date = _skipping("on_us_date")
    on_iso_date = _skipping("on_iso_date")
    on_utc_offset = _skipping("on_utc_offset")
    on_tz_name = _skipping("on_tz_name")

    def on_24_hour(self, ns: NumericSystem) -> None:
        if ns is NumericSystem.STANDARD:
            self._write(self._hour(), 2)
        else:
            self._localized("%H", hour=self._hour())

    def on_12_hour(self, ns: NumericSystem) -> None:
        if ns is NumericSystem.STANDARD:
            self._write(self._hour12(), 2)
        else:
            self._localized("%I", hour=self._hour())

    def on_minute(self, ns: NumericSystem) -> None:
        if ns is NumericSystem.STANDARD:
            self._write(self._minute(), 2)
        else:
            self._localized("%M", minute=self._minute())

    def on_second(self, ns: NumericSystem) -> None:
        if ns is NumericSystem.STANDARD:
            self._write(self._second(), 2)
            if self.milliseconds != 0:
                self._parts.append(".")
                self._write(self.milliseconds, 3)
        else:
            self._localized("%S", second=self._second())

    def on_12_hour_time(self) -> None:
        self._localized("%I:%M:%S %p", self._hour(), self._minute(), self._second())

    def on_24_hour_time(self) -> None:
        self._write(self._hour(), 2)
        self._parts.append(":")
        self._write(self._minute(), 2)

    def on_iso_time(self) -> None:
        self.on_24_hour_time()
        self._parts.append(":")
        self._write(self._second(), 2)

    def on_am_pm(self) -> None:
        self._localized("%p", self._hour(), self._minute(), self._second())


_UNITS = {
    Fraction(1, 10**18): "as",
    Fraction(1, 10**15): "fs",
    Fraction(1, 10**12): "ps",
    Fraction(1, 10**9): "ns",
    Fraction(1, 10**6): "µs",
    Fraction(1, 10**3): "ms",
    Fraction(1, 100): "cs",
    Fraction(1, 10): "ds",
    Fraction(1): "s",
    Fraction(10): "das",
    Fraction(100): "hs",
    Fraction(10**3): "ks",
    Fraction(10**6): "Ms",
    Fraction(10**9): "Gs",
    Fraction(10**12): "Ts",
    Fraction(10**15): "Ps",
    Fraction(10**18): "Es",
    Fraction(60): "m",
    Fraction(3600): "h",
}


def unit_suffix(period: Fraction | int) -> str | None:
    """Unit suffix for a tick period in seconds, or None if it has none."""
    return _UNITS.get(Fraction(period))


def _parse_align_width(spec: str) -> tuple[str, str, int, str]:
    fill, align, pos = " ", "<", 0
    if len(spec) >= 2 and spec[1] in _ALIGN_CHARS:
        fill, align, pos = spec[0], spec[1], 2
    elif spec and spec[0] in _ALIGN_CHARS:
        align, pos = spec[0], 1
    digits_end = pos
    while digits_end < len(spec) and spec[digits_end].isdigit():
        digits_end += 1
    width = int(spec[pos:digits_end]) if digits_end > pos else 0
    return fill, align, width, spec[digits_end:]


def _align(text: str, fill: str, align: str, width: int) -> str:
    missing = width - len(text)
    if missing <= 0:
        return text
    if align == "^":
        left = missing // 2
        return fill * left + text + fill * (missing - left)
    if align in (">", "="):
        return fill * missing + text
    return text + fill * missing


def format_duration(count: int, period: Fraction | int = 1, spec: str = "") -> str:
    """Render ``count`` ticks of ``period`` seconds according to ``spec``.

    ``spec`` takes an optional fill and alignment, a width, and chrono
    specifiers; with no specifiers the count is written with its unit.
    """
    period = Fraction(period)
    fill, align, width, rest = _parse_align_width(spec)
    chrono = rest[: check_chrono_format(rest)]
    if not chrono:
        unit = unit_suffix(period)
        if unit is not None:
            text = f"{count}{unit}"
        elif period.denominator == 1:
            text = f"{count}[{period.numerator}]s"
        else:
            text = f"{count}[{period.numerator}/{period.denominator}]s"
    else:
        total = Fraction(count) * period
        seconds = int(total)
        milliseconds = int((total - seconds) * 1000)
        formatter = DurationFormatter(seconds, milliseconds)
        parse_chrono_format(chrono, formatter)
        text = formatter.result()
    return _align(text, fill, align, width)