"""Timers for debounced previews and commit grace windows."""

from __future__ import annotations

import heapq
import itertools
import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class _ManualTimer:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by a virtual clock.

    Nothing runs until :meth:`advance` moves the clock; timers then fire in
    due order on the calling thread. Callbacks may schedule further timers,
    which fire in the same call if they fall due before the new time.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(callback)
        heapq.heappush(self._queue, (self.now + max(delay, 0.0), next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that have neither fired nor been cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
        self.now = target

    def run_all(self) -> None:
        """Fire every pending timer, however far in the future."""
        while self.pending:
            self.advance(max(due for due, _, _ in self._queue) - self.now)


class Debouncer:
    """Runs only the last of a burst of calls, *delay* seconds after it.

    Each call bumps a generation counter; a timer whose generation is no
    longer current does nothing when it fires, even if cancelling it came
    too late.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._generation = 0

    def call(self, fn: Callable[[], None]) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._handle is not None:
                self._handle.cancel()
            self._handle = self._scheduler.call_later(
                self._delay, lambda: self._fire(generation, fn)
            )

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    def _fire(self, generation: int, fn: Callable[[], None]) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
        fn()
