"""Countdown scheduling.

The engine never touches a clock directly. It asks a scheduler to call it
back after a delay and keeps the returned handle so it can cancel the
countdown. ``ManualScheduler`` runs on virtual time advanced by the caller;
``ThreadingScheduler`` uses wall-clock timers and always hands expiries to
a dispatch callable (normally ``Mailbox.post``) so they run on the thread
that owns the game. Handle due times are absolute, in milliseconds on the
scheduler's own clock.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol


logger = logging.getLogger(__name__)


@dataclass
class TimerHandle:
    due_ms: int
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    _timer: Optional[threading.Timer] = field(default=None, repr=False)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def fire(self) -> None:
        # Checked at run time: the handle may be cancelled after the timer thread queued it
        if self.cancelled:
            logger.debug("Dropping cancelled timer due at %dms", self.due_ms)
            return
        self.cancelled = True
        self.callback()


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class ManualScheduler:
    """Virtual-time scheduler; nothing fires until ``advance`` is called."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: List[tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now_ms + int(delay_ms), callback)
        self._prune()
        heapq.heappush(self._queue, (handle.due_ms, next(self._seq), handle))
        return handle

    def _prune(self) -> None:
        if any(h.cancelled for _, _, h in self._queue):
            self._queue = [entry for entry in self._queue if not entry[2].cancelled]
            heapq.heapify(self._queue)

    def pending(self) -> List[TimerHandle]:
        return sorted((h for _, _, h in self._queue if not h.cancelled), key=lambda h: h.due_ms)

    def next_due(self) -> Optional[int]:
        live = self.pending()
        return live[0].due_ms if live else None

    def advance(self, delay_ms: int) -> int:
        """Move virtual time forward, firing every timer that falls due. Returns the count fired."""
        target = self.now_ms + int(delay_ms)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = due
            handle.fire()
            fired += 1
        self.now_ms = target
        return fired

    def run_next(self) -> bool:
        """Jump straight to the next live timer and fire it."""
        due = self.next_due()
        if due is None:
            return False
        self.advance(due - self.now_ms)
        return True


class ThreadingScheduler:
    """Wall-clock scheduler backed by ``threading.Timer``.

    ``dispatch`` is required: expiries never run on the timer thread, only
    on whichever thread drains what ``dispatch`` enqueues.
    """

    def __init__(
        self,
        dispatch: Callable[[Callable[[], None]], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if dispatch is None:
            raise ValueError("ThreadingScheduler needs a dispatch callable, e.g. Mailbox.post")
        self._dispatch = dispatch
        self._clock = clock
        self._lock = threading.Lock()
        self._handles: List[TimerHandle] = []

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now_ms() + int(delay_ms), callback)

        def expire() -> None:
            self._dispatch(handle.fire)

        timer = threading.Timer(delay_ms / 1000.0, expire)
        timer.daemon = True
        handle._timer = timer
        with self._lock:
            self._handles = [h for h in self._handles if not h.cancelled]
            self._handles.append(handle)
        timer.start()
        return handle

    def close(self) -> None:
        with self._lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
