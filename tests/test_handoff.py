"""Tests for the agent handoff animator."""

from __future__ import annotations

from workflow_tui.core.handoff import IDLE_HANDOFF, HandoffAnimator
from workflow_tui.core.scheduler import ManualScheduler


def _animator(sched: ManualScheduler, **kwargs) -> HandoffAnimator:
    return HandoffAnimator(sched, **kwargs)


class TestHandoffTimeline:
    def test_active_then_fading_then_idle(self):
        sched = ManualScheduler()
        anim = _animator(sched)
        anim.start("planner", "developer")

        sched.advance(1000)
        snap = anim.snapshot()
        assert snap.is_animating is True
        assert snap.is_fading is False
        assert (snap.previous_agent, snap.current_agent) == ("planner", "developer")

        sched.advance(600)
        assert anim.snapshot().is_fading is True

        sched.advance(400)
        assert anim.snapshot() == IDLE_HANDOFF
        assert sched.active_count == 0

    def test_progress_and_arrow_frame(self):
        sched = ManualScheduler()
        anim = _animator(sched)
        anim.start("a", "b")
        assert anim.snapshot().arrow_frame == 0
        sched.advance(1000)
        snap = anim.snapshot()
        assert snap.progress == 0.5
        assert 0 < snap.arrow_frame < 8
        sched.advance(900)
        assert anim.snapshot().arrow_frame == 7

    def test_on_change_called_per_frame(self):
        sched = ManualScheduler()
        ticks: list[int] = []
        anim = _animator(sched, on_change=lambda: ticks.append(sched.now))
        anim.start("a", "b")
        sched.advance(300)
        assert ticks == [100, 200, 300]


class TestHandoffObserve:
    def test_first_agent_does_not_animate(self):
        anim = _animator(ManualScheduler())
        assert anim.observe("planner") is False
        assert anim.is_animating is False

    def test_change_animates(self):
        anim = _animator(ManualScheduler())
        anim.observe("planner")
        assert anim.observe("architect") is True
        snap = anim.snapshot()
        assert (snap.previous_agent, snap.current_agent) == ("planner", "architect")

    def test_same_agent_is_not_a_transition(self):
        anim = _animator(ManualScheduler())
        anim.observe("planner")
        assert anim.observe("planner") is False

    def test_clearing_agent_does_not_animate(self):
        anim = _animator(ManualScheduler())
        anim.observe("planner")
        assert anim.observe(None) is False
        # No prior agent after a clear either
        assert anim.observe("architect") is False

    def test_new_handoff_replaces_running_one(self):
        sched = ManualScheduler()
        anim = _animator(sched)
        anim.observe("planner")
        anim.observe("architect")
        sched.advance(1500)
        anim.observe("developer")
        snap = anim.snapshot()
        assert (snap.previous_agent, snap.current_agent) == ("architect", "developer")
        assert snap.elapsed_ms == 0
        assert sched.active_count == 1


class TestHandoffLifecycle:
    def test_dispose_stops_timer_and_ignores_later_starts(self):
        sched = ManualScheduler()
        anim = _animator(sched)
        anim.start("a", "b")
        anim.dispose()
        assert sched.active_count == 0
        anim.start("b", "c")
        assert anim.snapshot() == IDLE_HANDOFF
        assert sched.active_count == 0

    def test_reset_forgets_last_agent(self):
        anim = _animator(ManualScheduler())
        anim.observe("planner")
        anim.reset()
        assert anim.observe("architect") is False

    def test_custom_duration(self):
        sched = ManualScheduler()
        anim = _animator(sched, duration_ms=400, frame_interval_ms=50)
        assert anim.fade_start_ms == 300
        anim.start("a", "b")
        sched.advance(350)
        assert anim.snapshot().is_fading is True
        sched.advance(50)
        assert anim.is_animating is False


class TestHandoffFrameInterval:
    def test_uneven_interval_still_fades_and_ends_on_time(self):
        sched = ManualScheduler()
        anim = _animator(sched, frame_interval_ms=700)
        anim.observe("planner")
        anim.observe("developer")

        sched.advance(1499)
        assert anim.snapshot().is_fading is False
        sched.advance(101)
        snap = anim.snapshot()
        assert snap.is_fading is True
        assert snap.elapsed_ms == 1600

        sched.advance(400)
        assert anim.snapshot() == IDLE_HANDOFF
        assert sched.active_count == 0

    def test_listeners_see_fade_start_and_end(self):
        sched = ManualScheduler()
        seen: list[tuple[int, bool, bool]] = []

        def record():
            snap = anim.snapshot()
            seen.append((sched.now, snap.is_animating, snap.is_fading))

        anim = _animator(sched, frame_interval_ms=700, on_change=record)
        anim.start("planner", "developer")
        sched.advance(2500)
        assert seen == [
            (700, True, False),
            (1400, True, False),
            (1500, True, True),
            (2000, False, False),
        ]
