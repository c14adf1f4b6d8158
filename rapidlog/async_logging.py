"""Asynchronous logging: a pool of worker threads and a logger that posts to it."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterable
from enum import Enum
from typing import Callable, NamedTuple, Optional

from rapidlog.blocking_queue import BlockingQueue
from rapidlog.common import LogMessage, SpdlogError
from rapidlog.logger import Logger
from rapidlog.sinks import Sink

MAX_THREADS = 1000
_DEQUEUE_TIMEOUT = 10.0


class OverflowPolicy(Enum):
    """What a full queue does with a new message."""

    BLOCK = "block"
    OVERRUN_OLDEST = "overrun_oldest"


class _MsgType(Enum):
    LOG = "log"
    FLUSH = "flush"
    TERMINATE = "terminate"


class _AsyncMsg(NamedTuple):
    kind: _MsgType
    logger: Optional[AsyncLogger] = None
    msg: Optional[LogMessage] = None


class ThreadPool:
    """Worker threads draining a bounded queue of log and flush requests."""

    def __init__(
        self,
        q_max_items: int,
        threads_n: int = 1,
        on_thread_start: Callable[[], object] | None = None,
    ) -> None:
        if threads_n < 1 or threads_n > MAX_THREADS:
            raise SpdlogError(
                "thread_pool(): invalid threads_n param (valid range is 1-1000)"
            )
        self._queue = BlockingQueue(q_max_items)
        self._closed = False
        self._state_lock = threading.Lock()
        start = on_thread_start or (lambda: None)
        self._threads = [
            threading.Thread(
                target=self._worker, args=(start,), daemon=True, name=f"rapidlog-worker-{number}"
            )
            for number in range(threads_n)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def post_log(
        self,
        logger: AsyncLogger,
        msg: LogMessage,
        overflow_policy: OverflowPolicy = OverflowPolicy.BLOCK,
    ) -> None:
        """Queue a message for ``logger`` to write on a worker thread."""
        self._post(_AsyncMsg(_MsgType.LOG, logger, msg), overflow_policy)

    def post_flush(
        self, logger: AsyncLogger, overflow_policy: OverflowPolicy = OverflowPolicy.BLOCK
    ) -> None:
        """Queue a flush of ``logger``'s sinks."""
        self._post(_AsyncMsg(_MsgType.FLUSH, logger), overflow_policy)

    def overrun_counter(self) -> int:
        """Number of queued messages discarded because the queue was full."""
        return self._queue.overrun_counter()

    def shutdown(self) -> None:
        """Let the workers drain the queue, then stop and join them."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        for _ in self._threads:
            self._queue.enqueue(_AsyncMsg(_MsgType.TERMINATE))
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def _post(self, item: _AsyncMsg, overflow_policy: OverflowPolicy) -> None:
        if self._closed:
            raise SpdlogError("async log: thread pool doesn't exist anymore")
        if OverflowPolicy(overflow_policy) is OverflowPolicy.BLOCK:
            self._queue.enqueue(item)
        else:
            self._queue.enqueue_nowait(item)

    def _worker(self, on_thread_start: Callable[[], object]) -> None:
        on_thread_start()
        while self._process_next():
            pass

    def _process_next(self) -> bool:
        """Handle one queued request; False once told to terminate."""
        try:
            item = self._queue.dequeue_for(_DEQUEUE_TIMEOUT)
        except queue.Empty:
            return True
        if item.kind is _MsgType.TERMINATE:
            return False
        try:
            if item.kind is _MsgType.LOG:
                item.logger._backend_log(item.msg)
            else:
                item.logger._backend_flush()
        except Exception:
            # An error handler that raises must not stop the worker.
            pass
        return True


class AsyncLogger(Logger):
    """Logger whose sinks are written by a thread pool instead of the caller."""

    def __init__(
        self,
        name: str,
        sinks: Sink | Iterable[Sink] | None,
        thread_pool: ThreadPool,
        overflow_policy: OverflowPolicy = OverflowPolicy.BLOCK,
    ) -> None:
        super().__init__(name, sinks)
        self._thread_pool = thread_pool
        self._overflow_policy = OverflowPolicy(overflow_policy)

    def clone(self, name: str) -> AsyncLogger:
        """A new async logger sharing sinks, settings and thread pool."""
        return super().clone(name)

    def _sink_it(self, msg: LogMessage) -> None:
        self._thread_pool.post_log(self, msg, self._overflow_policy)

    def _flush(self) -> None:
        self._thread_pool.post_flush(self, self._overflow_policy)

    def _backend_log(self, msg: LogMessage) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                try:
                    sink.log(msg)
                except Exception as ex:
                    self._err_handler(str(ex) or type(ex).__name__)
        if self._should_flush(msg):
            self._backend_flush()

    def _backend_flush(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as ex:
                self._err_handler(str(ex) or type(ex).__name__)