from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class Mailbox:
    """Single-consumer queue of pending game mutations.

    Timer threads and the network transport ``post`` work here; the thread
    that owns the game drains it with ``process_pending`` or ``run``, so
    mutations are applied one at a time in arrival order.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Optional[tuple[Callable[..., Any], tuple, dict]]]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def post(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        if self.closed:
            logger.debug("Mailbox closed, dropping %r", fn)
            return
        self._queue.put((fn, args, kwargs))

    def process_pending(self) -> int:
        """Run everything queued so far without blocking. Returns the number processed."""
        processed = 0
        while not self.closed:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is None:
                break
            fn, args, kwargs = item
            fn(*args, **kwargs)
            processed += 1
        return processed

    def run(self, timeout: Optional[float] = None) -> None:
        """Process work until ``close`` is called. Exceptions propagate to the caller."""
        while not self.closed:
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                continue
            if item is None:
                break
            fn, args, kwargs = item
            fn(*args, **kwargs)

    def close(self) -> None:
        self._closed.set()
        self._queue.put(None)
