# rapidlog

A small logging library built around named loggers and pluggable sinks.

A logger checks the level of each message. If the message passes, the logger
hands it to each of its sinks. Each sink formats the record with its own
formatter and writes it to its destination. A sink can be:

- a file
- a rotating set of files
- any text stream, stdout or stderr, plain or ANSI-coloured
- a filter that drops repeated messages

An asynchronous logger posts its records to a pool of worker threads, so the
calling thread does not wait on I/O.

## Installation

```
pip install rapidlog
```

Python 3.10 or newer is required. The package has no third-party
dependencies.

## Quick start

```python
from rapidlog.logger import Logger
from rapidlog.sinks import StdoutSink, BasicFileSink

console = StdoutSink()
logfile = BasicFileSink("app.log", True)   # True: truncate on open

log = Logger("app", [console, logfile])
log.set_pattern("[%l] %v")

log.info("Welcome!")
log.warn("Disk usage at {}%", 91)
log.error("Could not open {}", "config.toml")
log.flush()
```

When extra arguments are given, the message is a `str.format` template with
`{}` placeholders. You can also log any other object directly, as in
`log.info(42)`.

`Logger(name, sinks)` takes one sink, an iterable of sinks, or `None`.
`Logger.sinks()` returns the logger's own list, so changes to that list take
effect. `Logger.clone(name)` returns a new logger that shares the same sinks
and settings.

`BasicFileSink` opens the file in append mode by default. The folder that
holds the file must already exist.

## Levels

`rapidlog.common.Level` holds the levels in order: `TRACE`, `DEBUG`, `INFO`,
`WARN`, `ERR`, `CRITICAL` and `OFF`. A logger starts at
`Logger.default_level()`, which is `INFO`. Each sink also has its own level,
set with `Sink.set_level`, and starts at `TRACE`.

```python
from rapidlog.common import Level, from_str, to_string_view, to_short_name

log.set_level(Level.DEBUG)
log.should_log(Level.TRACE)        # False
from_str("warning")                # Level.WARN
to_string_view(Level.ERR)          # "error"
to_short_name(Level.CRITICAL)      # "C"
```

`from_str` returns `Level.OFF` for any name it does not know.

`log.flush_on(level)` makes the logger flush its sinks after every message at
or above that level.

## Patterns

`Logger.set_pattern(pattern, time_type)` gives each sink its own
`rapidlog.pattern.PatternFormatter`. `Sink.set_pattern` does the same for one
sink. `TimeType.LOCAL` (the default) or `TimeType.UTC` selects how timestamps
are shown. Every formatted record ends with `"\n"`.

| Flag | Output |
|------|--------|
| `%v` | the message text |
| `%n` | logger name |
| `%l` / `%L` | level name / one-letter level |
| `%t` / `%P` | thread id / process id |
| `%Y %m %d %H %M %S` | year, month, day, hour, minute, second |
| `%e %f %F` | milliseconds, microseconds, nanoseconds |
| `%E` | seconds since the epoch |
| `%a %A %b %B` | weekday and month names, short and full |
| `%c %D %x %T %X %R %r %p %I %C %z` | `strftime`-like date and time forms |
| `%^ ... %$` | range that colour sinks colour |
| `%+` | the default full format: `[date time.ms] [name] [level] message` |
| `%%` | a literal `%` |

You can pad a field to a width of up to 64 characters:

- `%8l` pads on the left.
- `%-8l` pads on the right.
- `%=8l` centres the field.

`rapidlog.pattern` also provides `pad2`, `pad3`, `pad6` and `pad9`, which
zero-pad numbers to those widths.

## Error handling

A problem while logging never escapes from a log call. Bad format arguments
and failing sinks are examples. By default the logger reports the problem on
stderr, at most once a minute. You can install your own handler:

```python
log.set_error_handler(lambda message: print("logging failed:", message))
```

If the handler raises, the exception reaches the caller of the log call.

## Asynchronous logging

```python
from rapidlog.async_logging import ThreadPool, AsyncLogger, OverflowPolicy
from rapidlog.sinks import BasicFileSink

pool = ThreadPool(8192, 1)          # queue size, worker threads (1-1000)
alog = AsyncLogger("async", BasicFileSink("async.log"), pool,
                   OverflowPolicy.OVERRUN_OLDEST)
alog.info("Hello {}", 1)
alog.flush()
pool.shutdown()                     # drain the queue, then stop the workers
```

The pool has two overflow policies:

- `BLOCK` (the default) waits until the queue has room.
- `OVERRUN_OLDEST` drops the oldest queued record when the queue is full.

`ThreadPool.overrun_counter()` reports how many records were dropped.
`ThreadPool` also works as a context manager that shuts down on exit. When a
sink fails on a worker thread, the logger's error handler is called on that
thread.

The bounded queue is available on its own as
`rapidlog.blocking_queue.BlockingQueue`. Its methods are:

- `enqueue` waits for room.
- `enqueue_nowait` overwrites the oldest item when the queue is full.
- `dequeue_for` raises `queue.Empty` if the timeout passes with no item.

## Other sinks

- `rapidlog.sinks.StreamSink(stream)` writes to any text stream.
  `StdoutSink` and `StderrSink` flush after every message.
- `rapidlog.rotating.RotatingFileSink(base_filename, max_size, max_files, rotate_on_open)`
  shifts the files along when the current file would grow past `max_size`
  bytes. `log.txt` becomes `log.1.txt`, `log.1.txt` becomes `log.2.txt`, and
  so on, up to `max_files`. `RotatingFileSink.calc_filename("logs/mylog.txt", 3)`
  gives `"logs/mylog.3.txt"`.
- `rapidlog.dup_filter.DupFilterSink(max_skip_duration)` forwards records to
  the sinks added with `add_sink`. The duration is in seconds or a
  `timedelta`. The sink skips a message that repeats the one before it within
  that duration. When a different message arrives, it first sends
  `"Skipped N duplicate messages.."`.
- `rapidlog.color.AnsiColorSink(stream, mode)`, `AnsiColorStdoutSink` and
  `AnsiColorStderrSink` colour the `%^ ... %$` range of each record by level.
  `ColorMode` selects one of:
  - `ALWAYS`
  - `AUTOMATIC`, which colours only on a colour terminal
  - `NEVER`

  `set_color(level, code)` changes the colour of one level.

## Formatting helpers

- `rapidlog.ranges.format_range([1, 2, "a"])` gives `'{1, 2, "a"}'`.
  `format_tuple((1, "x"))` gives `'(1, "x")'`.
- `rapidlog.chrono_format.format_duration(count, period, spec)` renders a
  duration. `format_duration(42, Fraction(1, 1000))` gives `"42ms"`.
  `format_duration(3725, 1, "%H:%M:%S")` gives `"01:02:05"`.
  `check_chrono_format` validates a spec and rejects specifiers that need a
  calendar date.

## What this package does not do

The package has no global table of loggers by name and no process-wide
default logger. It has no module-level shortcuts such as a package-wide
`info()` or `set_pattern()`, and no periodic background flushing. Create
`Logger` or `AsyncLogger` objects yourself and keep references to them. Call
`flush()` or use `flush_on` when you need output written.

The package also ships no command-line tool. It installs no commands.