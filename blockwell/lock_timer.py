"""
Lock delay for Blockwell.
A resting piece accumulates a lock percentage once per frame and locks when it
reaches 100. Any successful shift or rotation cancels the delay.
"""

from typing import Callable

# Accumulating 100/n floats n times lands just short of 100
LOCK_THRESHOLD = 99.99


class LockTimer:
    """Cancellable accumulate-and-threshold timer bound to one piece."""

    def __init__(self, scheduler, interval: float, ticks_to_lock: int,
                 on_lock: Callable[[], None]):
        self.scheduler = scheduler
        self.interval = interval
        self.step = 100 / ticks_to_lock
        self.on_lock = on_lock
        self.percentage = 0.0
        self._handle = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self):
        """Begin ticking. No-op if already running."""
        if self._handle is None:
            self._handle = self.scheduler.set_interval(self.tick, self.interval)

    def cancel(self):
        """Stop ticking and reset to 0%. Idempotent."""
        self.scheduler.clear_interval(self._handle)
        self._handle = None
        self.percentage = 0.0

    def tick(self):
        self.percentage = min(100.0, self.percentage + self.step)
        if self.is_locked():
            self.cancel()
            self.on_lock()

    def force(self):
        """Jump straight to 100%."""
        self.percentage = 100.0

    def is_locked(self) -> bool:
        return self.percentage >= LOCK_THRESHOLD

    def __repr__(self):
        return f"LockTimer({self.percentage:.1f}%, running={self.running})"
