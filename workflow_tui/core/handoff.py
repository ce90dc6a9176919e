"""Agent handoff animation state machine.

A single-slot timer plus snapshot: when the active agent changes from one
agent to another, the animator records ``previous → current`` and runs for
``duration_ms``.  The last quarter (by default) of the run is the fade
phase.  A new transition replaces the one in flight; nothing is queued.

The animator knows nothing about panels or display modes; it only exposes
:class:`HandoffAnimationState` for the presentation layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from ..constants import (
    HANDOFF_ARROW_FRAMES,
    HANDOFF_DURATION_MS,
    HANDOFF_FADE_RATIO,
    HANDOFF_FRAME_INTERVAL_MS,
)
from .scheduler import Scheduler, TimerHandle


@dataclass(frozen=True)
class HandoffAnimationState:
    is_animating: bool = False
    previous_agent: str | None = None
    current_agent: str | None = None
    elapsed_ms: int = 0
    is_fading: bool = False
    progress: float = 0.0  # elapsed / duration, 0-1
    arrow_frame: int = 0


IDLE_HANDOFF = HandoffAnimationState()


def _ease_in_out(p: float) -> float:
    if p < 0.5:
        return 4 * p * p * p
    return 1 - ((-2 * p + 2) ** 3) / 2


class HandoffAnimator:
    """Timer-driven Idle → Active → Fading → Idle state machine."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        duration_ms: int = HANDOFF_DURATION_MS,
        fade_ratio: float = HANDOFF_FADE_RATIO,
        frame_interval_ms: int = HANDOFF_FRAME_INTERVAL_MS,
        arrow_frames: int = HANDOFF_ARROW_FRAMES,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._duration_ms = max(1, int(duration_ms))
        self._fade_start_ms = self._duration_ms * fade_ratio
        self._frame_interval_ms = max(1, int(frame_interval_ms))
        self._arrow_frames = max(1, arrow_frames)
        self._on_change = on_change

        self._last_agent: str | None = None
        self._previous: str | None = None
        self._current: str | None = None
        self._started_at: int = 0
        self._timer: TimerHandle | None = None
        self._timer_interval_ms: int = 0
        self._disposed = False

    # -- Properties -----------------------------------------------------------

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def fade_start_ms(self) -> float:
        return self._fade_start_ms

    @property
    def is_animating(self) -> bool:
        self._expire()
        return self._current is not None

    # -- Transitions ----------------------------------------------------------

    def observe(self, agent: str | None) -> bool:
        """Feed the latest active agent; start a handoff if it changed.

        The first agent ever seen, a repeat of the current agent, and a
        change to or from "no agent" do not animate.  Returns True when a
        new animation was started.
        """
        prior = self._last_agent
        self._last_agent = agent
        if self._disposed or not prior or not agent or agent == prior:
            return False
        self.start(prior, agent)
        return True

    def start(self, previous: str, current: str) -> None:
        """Begin a handoff, replacing any animation already running."""
        if self._disposed:
            return
        self._stop_timer()
        self._previous = previous
        self._current = current
        self._started_at = self._scheduler.now
        self._arm()

    def reset(self) -> None:
        """Drop the animation in flight and forget the last agent."""
        self._finish()
        self._last_agent = None

    def dispose(self) -> None:
        self._finish()
        self._disposed = True

    # -- Snapshot -------------------------------------------------------------

    def snapshot(self) -> HandoffAnimationState:
        self._expire()
        if self._current is None:
            return IDLE_HANDOFF
        elapsed = self._elapsed_ms()
        progress = min(1.0, elapsed / self._duration_ms)
        frame = min(self._arrow_frames - 1, int(_ease_in_out(progress) * self._arrow_frames))
        return HandoffAnimationState(
            is_animating=True,
            previous_agent=self._previous,
            current_agent=self._current,
            elapsed_ms=elapsed,
            is_fading=elapsed >= self._fade_start_ms,
            progress=progress,
            arrow_frame=frame,
        )

    # -- Internals ------------------------------------------------------------

    def _elapsed_ms(self) -> int:
        return max(0, self._scheduler.now - self._started_at)

    def _expire(self) -> None:
        if self._current is not None and self._elapsed_ms() >= self._duration_ms:
            self._finish()

    def _arm(self) -> None:
        """(Re)arm the frame timer so no tick steps past the fade start or the end."""
        elapsed = self._elapsed_ms()
        boundary = self._duration_ms if elapsed >= self._fade_start_ms else self._fade_start_ms
        interval = max(1, min(self._frame_interval_ms, math.ceil(boundary - elapsed)))
        if self._timer is not None and interval == self._timer_interval_ms:
            return
        self._stop_timer()
        self._timer = self._scheduler.call_every(interval, self._tick)
        self._timer_interval_ms = interval

    def _tick(self) -> None:
        self._expire()
        if self._current is not None:
            self._arm()
        if self._on_change is not None:
            self._on_change()

    def _finish(self) -> None:
        self._stop_timer()
        self._previous = None
        self._current = None
        self._started_at = 0

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
            self._timer_interval_ms = 0
