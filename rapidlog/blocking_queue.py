"""Bounded multi-producer, multi-consumer queue with blocking and overrun modes."""

from __future__ import annotations

import queue
import threading
from collections import deque
from typing import Any


class BlockingQueue:
    """A fixed-capacity queue shared between producer and consumer threads.

    ``enqueue`` waits for room, ``enqueue_nowait`` drops the oldest item when
    full, and ``dequeue_for`` waits up to a timeout for an item.
    """

    def __init__(self, max_items: int) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self._max_items = max_items
        self._items: deque[Any] = deque()
        self._overruns = 0
        self._lock = threading.Lock()
        self._push_cv = threading.Condition(self._lock)
        self._pop_cv = threading.Condition(self._lock)

    def _full(self) -> bool:
        return len(self._items) >= self._max_items

    def enqueue(self, item: Any) -> None:
        """Add an item, blocking until there is room for it."""
        with self._lock:
            self._pop_cv.wait_for(lambda: not self._full())
            self._items.append(item)
            self._push_cv.notify()

    def enqueue_nowait(self, item: Any) -> None:
        """Add an item at once, discarding the oldest one if the queue is full."""
        with self._lock:
            if self._full():
                self._items.popleft()
                self._overruns += 1
            self._items.append(item)
            self._push_cv.notify()

    def dequeue_for(self, timeout: float) -> Any:
        """Remove and return the oldest item, waiting up to ``timeout`` seconds.

        Raises ``queue.Empty`` if nothing arrived in time.
        """
        with self._lock:
            if not self._push_cv.wait_for(lambda: bool(self._items), timeout):
                raise queue.Empty
            item = self._items.popleft()
            self._pop_cv.notify()
            return item

    def overrun_counter(self) -> int:
        """Number of items discarded by ``enqueue_nowait`` so far."""
        with self._lock:
            return self._overruns

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)