"""Repeating-timer abstraction used by the countdown and the handoff animator.

The controller never sleeps or busy-waits; it asks a :class:`Scheduler` for a
repeating callback and keeps the returned handle so the timer can be
stopped deterministically.  The Textual app supplies a scheduler backed by
``App.set_interval``; :class:`ManualScheduler` is a virtual clock for
headless use and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def stop(self) -> None: ...


class Scheduler(Protocol):
    @property
    def now(self) -> int:
        """Current time in milliseconds on this scheduler's clock."""
        ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Invoke *callback* every *interval_ms* until the handle is stopped."""
        ...


@dataclass
class _ManualTimer:
    interval_ms: int
    callback: Callable[[], None]
    next_due: int
    seq: int
    active: bool = field(default=True)

    def stop(self) -> None:
        self.active = False


class ManualScheduler:
    """A scheduler driven by an explicit virtual clock.

    ``advance(ms)`` moves time forward and fires every due callback in
    time order (ties broken by creation order).  Timers created or stopped
    from inside a callback take effect immediately.
    """

    def __init__(self) -> None:
        self._now: int = 0
        self._timers: list[_ManualTimer] = []
        self._seq: int = 0

    @property
    def now(self) -> int:
        return self._now

    @property
    def active_count(self) -> int:
        return sum(1 for t in self._timers if t.active)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        interval = max(1, int(interval_ms))
        self._seq += 1
        timer = _ManualTimer(interval, callback, self._now + interval, self._seq)
        self._timers.append(timer)
        return timer

    def advance(self, ms: int) -> None:
        """Move the clock forward by *ms*, firing due timers along the way."""
        target = self._now + max(0, int(ms))
        while True:
            self._timers = [t for t in self._timers if t.active]
            due = [t for t in self._timers if t.next_due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.next_due, t.seq))
            self._now = timer.next_due
            timer.next_due += timer.interval_ms
            timer.callback()
        self._now = target
