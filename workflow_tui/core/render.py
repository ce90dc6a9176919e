"""Immutable render snapshot handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from .auto_execute import CountdownUrgency, countdown_seconds, countdown_urgency
from .breakpoints import BreakpointInfo, resolve
from .display_filter import visible_messages
from .handoff import IDLE_HANDOFF, HandoffAnimationState
from .models import (
    AgentInfo,
    DisplayMode,
    Message,
    PendingPreview,
    PreviewConfig,
    SessionState,
    SubtaskProgress,
    TokenUsage,
)


@dataclass(frozen=True)
class RenderState:
    display_mode: DisplayMode
    breakpoint: BreakpointInfo
    messages: tuple[Message, ...]  # windowed and filtered for display_mode
    active_agent: str | None
    previous_agent: str | None
    agents: tuple[AgentInfo, ...]
    parallel_agents: tuple[AgentInfo, ...]
    show_parallel_panel: bool
    subtask_progress: SubtaskProgress | None
    current_task_id: str | None
    pending_preview: PendingPreview | None
    remaining_ms: int | None
    countdown_seconds: int | None
    countdown_urgency: CountdownUrgency | None
    preview_low_confidence: bool
    preview_mode: bool
    preview_config: PreviewConfig
    show_thoughts: bool
    is_processing: bool
    edit_mode_input: str | None
    tokens: TokenUsage
    cost: float
    handoff: HandoffAnimationState = IDLE_HANDOFF


def build_render_state(
    state: SessionState,
    handoff: HandoffAnimationState = IDLE_HANDOFF,
) -> RenderState:
    """Project *state* (plus derived fields) into a :class:`RenderState`."""
    remaining = state.remaining_ms
    pending = state.pending_preview
    low_confidence = (
        pending is not None
        and not pending.intent.confidence >= state.preview_config.confidence_threshold
    )
    return RenderState(
        display_mode=state.display_mode,
        breakpoint=resolve(state.terminal_width),
        messages=visible_messages(state.messages, state.display_mode),
        active_agent=state.active_agent,
        previous_agent=state.previous_agent,
        agents=tuple(state.agents),
        parallel_agents=tuple(state.parallel_agents),
        show_parallel_panel=state.show_parallel_panel,
        subtask_progress=state.subtask_progress,
        current_task_id=state.current_task_id,
        pending_preview=pending,
        remaining_ms=remaining,
        countdown_seconds=None if remaining is None else countdown_seconds(remaining),
        countdown_urgency=None if remaining is None else countdown_urgency(remaining),
        preview_low_confidence=low_confidence,
        preview_mode=state.preview_mode,
        preview_config=state.preview_config,
        show_thoughts=state.show_thoughts,
        is_processing=state.is_processing,
        edit_mode_input=state.edit_mode_input,
        tokens=state.tokens,
        cost=state.cost,
        handoff=handoff,
    )
