"""Fast logging with named loggers, pattern formatting and pluggable sinks."""

__version__ = "1.4.0"

__all__ = [
    "async_logging",
    "blocking_queue",
    "chrono_format",
    "color",
    "common",
    "dup_filter",
    "file_helper",
    "logger",
    "pattern",
    "ranges",
    "rotating",
    "sinks",
]