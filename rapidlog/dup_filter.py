"""Sink that drops repeated identical messages before passing them on."""

from __future__ import annotations

import datetime
from collections.abc import Iterable

from rapidlog.common import LogMessage
from rapidlog.pattern import Formatter
from rapidlog.sinks import Sink


class _DistSink(Sink):
    """Forwards every message to a list of child sinks."""

    def __init__(self) -> None:
        super().__init__()
        self._sinks: list[Sink] = []

    def add_sink(self, sink: Sink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        with self._lock:
            self._sinks = [s for s in self._sinks if s is not sink]

    def set_sinks(self, sinks: Iterable[Sink]) -> None:
        with self._lock:
            self._sinks = list(sinks)

    def set_pattern(self, pattern: str) -> None:
        with self._lock:
            for sink in self._sinks:
                sink.set_pattern(pattern)

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._formatter = formatter
            for sink in self._sinks:
                sink.set_formatter(formatter.clone())

    def _dispatch(self, msg: LogMessage) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                sink.log(msg)

    def _sink_it(self, msg: LogMessage) -> None:
        self._dispatch(msg)

    def _flush(self) -> None:
        for sink in self._sinks:
            sink.flush()


class DupFilterSink(_DistSink):
    """Skips a message identical to the previous one within ``max_skip_duration``.

    When a different message arrives after skips, a ``"Skipped N duplicate
    messages.."`` notice is sent first.
    """

    def __init__(self, max_skip_duration: float | datetime.timedelta) -> None:
        super().__init__()
        if isinstance(max_skip_duration, datetime.timedelta):
            max_skip_duration = max_skip_duration.total_seconds()
        self._max_skip_duration = float(max_skip_duration)
        self._last_msg_time = 0.0
        self._last_msg_payload = ""
        self._skip_counter = 0

    def add_sink(self, sink: Sink) -> None:
        super().add_sink(sink)

    def remove_sink(self, sink: Sink) -> None:
        super().remove_sink(sink)

    def set_sinks(self, sinks: Iterable[Sink]) -> None:
        super().set_sinks(sinks)

    def _sink_it(self, msg: LogMessage) -> None:
        if not self._filter(msg):
            self._skip_counter += 1
            return
        if self._skip_counter > 0:
            skipped = LogMessage(
                msg.logger_name,
                msg.level,
                f"Skipped {self._skip_counter} duplicate messages..",
            )
            self._dispatch(skipped)
        self._dispatch(msg)
        self._last_msg_time = msg.time
        self._skip_counter = 0
        self._last_msg_payload = msg.payload

    def _filter(self, msg: LogMessage) -> bool:
        elapsed = msg.time - self._last_msg_time
        return elapsed > self._max_skip_duration or msg.payload != self._last_msg_payload