"""
Deterministic timer scheduler for Blockwell.
Replaces wall-clock interval timers with a virtual clock that the host
advances explicitly, so every periodic activity runs in a reproducible order.
"""

import heapq
import itertools
from typing import Callable, List, Optional, Tuple

# Float slack when comparing due times against the virtual clock
EPSILON = 1e-6


class TimerHandle:
    """A registered interval timer."""

    def __init__(self, callback: Callable[[], None], interval: float, start: float):
        self.callback = callback
        self.interval = interval
        self.start = start
        self.fired = 0
        self.active = True

    @property
    def next_due(self) -> float:
        return self.start + (self.fired + 1) * self.interval

    def __repr__(self):
        state = "active" if self.active else "cancelled"
        return f"TimerHandle(interval={self.interval:.3f}, fired={self.fired}, {state})"


class Scheduler:
    """Virtual-clock interval scheduler.

    Timers are kept in a heap ordered by due time, then by scheduling order,
    so two timers due at the same instant fire first-in first-out. Every
    callback runs to completion before the next one starts.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def set_interval(self, callback: Callable[[], None], interval: float) -> TimerHandle:
        """Register a callback to fire every `interval` milliseconds."""
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        handle = TimerHandle(callback, interval, self.now)
        self._push(handle)
        return handle

    def clear_interval(self, handle: Optional[TimerHandle]):
        """Cancel a timer. Safe to call twice or with None."""
        if handle is not None:
            handle.active = False

    def clear_all(self):
        for _, _, handle in self._queue:
            handle.active = False
        self._queue = []

    def reset(self):
        self.clear_all()
        self.now = 0.0

    def advance(self, dt: float):
        """Move the clock forward by `dt` ms, firing due callbacks in order."""
        if dt < 0:
            raise ValueError(f"Cannot advance the clock backwards ({dt})")

        target = self.now + dt
        while self._queue and self._queue[0][0] <= target + EPSILON:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue

            self.now = max(self.now, due)
            handle.fired += 1
            handle.callback()

            # A callback may cancel its own handle
            if handle.active:
                self._push(handle)

        self.now = target

    def pending(self) -> int:
        """Number of live timers."""
        return sum(1 for _, _, handle in self._queue if handle.active)

    def _push(self, handle: TimerHandle):
        heapq.heappush(self._queue, (handle.next_due, next(self._counter), handle))
