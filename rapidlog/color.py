"""Console sinks that color the level part of each message with ANSI codes."""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import TextIO

from rapidlog.common import Level, LogMessage
from rapidlog.sinks import _CONSOLE_LOCK, Sink

_COLOR_TERMS = (
    "ansi", "color", "console", "cygwin", "gnome", "konsole", "kterm",
    "linux", "msys", "putty", "rxvt", "screen", "vt100", "xterm",
)


class ColorMode(Enum):
    """When a color sink emits escape codes."""

    ALWAYS = "always"
    AUTOMATIC = "automatic"
    NEVER = "never"


def _in_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


def _is_color_terminal() -> bool:
    if os.name == "nt":
        return True
    term = os.environ.get("TERM")
    if not term:
        return False
    return any(name in term for name in _COLOR_TERMS)


class AnsiColorSink(Sink):
    """Writes to a stream, wrapping the pattern's color range in an ANSI color.

    The color depends on the message level. In automatic mode colors are
    used only when the stream is a color terminal.
    """

    # Formatting codes
    reset = "\033[m"
    bold = "\033[1m"
    dark = "\033[2m"
    underline = "\033[4m"
    blink = "\033[5m"
    reverse = "\033[7m"
    concealed = "\033[8m"
    clear_line = "\033[K"

    # Foreground colors
    black = "\033[30m"
    red = "\033[31m"
    green = "\033[32m"
    yellow = "\033[33m"
    blue = "\033[34m"
    magenta = "\033[35m"
    cyan = "\033[36m"
    white = "\033[37m"

    # Background colors
    on_black = "\033[40m"
    on_red = "\033[41m"
    on_green = "\033[42m"
    on_yellow = "\033[43m"
    on_blue = "\033[44m"
    on_magenta = "\033[45m"
    on_cyan = "\033[46m"
    on_white = "\033[47m"

    # Bold colors
    yellow_bold = "\033[33m\033[1m"
    red_bold = "\033[31m\033[1m"
    bold_on_red = "\033[1m\033[41m"

    def __init__(self, stream: TextIO, mode: ColorMode = ColorMode.AUTOMATIC) -> None:
        super().__init__()
        self._lock = _CONSOLE_LOCK
        self._stream = stream
        self._should_do_colors = False
        self.set_color_mode(mode)
        self._colors: dict[Level, str] = {
            Level.TRACE: self.white,
            Level.DEBUG: self.cyan,
            Level.INFO: self.green,
            Level.WARN: self.yellow_bold,
            Level.ERR: self.red_bold,
            Level.CRITICAL: self.bold_on_red,
            Level.OFF: self.reset,
        }

    def set_color(self, level: Level, color: str) -> None:
        """Use ``color`` for messages at ``level``."""
        with self._lock:
            self._colors[Level(level)] = color

    def set_color_mode(self, mode: ColorMode) -> None:
        mode = ColorMode(mode)
        if mode is ColorMode.ALWAYS:
            self._should_do_colors = True
        elif mode is ColorMode.AUTOMATIC:
            self._should_do_colors = _in_terminal(self._stream) and _is_color_terminal()
        else:
            self._should_do_colors = False

    def should_color(self) -> bool:
        return self._should_do_colors

    def _sink_it(self, msg: LogMessage) -> None:
        record = self._formatter.format(msg)
        text = record.text
        start, end = record.color_range_start, record.color_range_end
        if self._should_do_colors and end > start:
            self._stream.write(
                text[:start]
                + self._colors[msg.level]
                + text[start:end]
                + self.reset
                + text[end:]
            )
        else:
            self._stream.write(text)
        self._stream.flush()

    def _flush(self) -> None:
        self._stream.flush()


class AnsiColorStdoutSink(AnsiColorSink):
    """Color sink writing to standard output."""

    def __init__(self, mode: ColorMode = ColorMode.AUTOMATIC) -> None:
        super().__init__(sys.stdout, mode)


class AnsiColorStderrSink(AnsiColorSink):
    """Color sink writing to standard error."""

    def __init__(self, mode: ColorMode = ColorMode.AUTOMATIC) -> None:
        super().__init__(sys.stderr, mode)