"""Status, agent, parallel and preview panels.

Each panel is a ``Static`` fed a :class:`RenderState` through
``update_from``.  The ``format_*`` helpers are pure so they can be tested
without a running app.
"""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from ..core.auto_execute import CountdownUrgency, format_percent
from ..core.handoff import HandoffAnimationState
from ..core.models import AgentInfo, AgentStatus, DisplayMode
from ..core.render import RenderState

_STATUS_ICONS = {
    AgentStatus.COMPLETED: ("✓", "green"),
    AgentStatus.ACTIVE: ("●", "bold cyan"),
    AgentStatus.WAITING: ("…", "yellow"),
    AgentStatus.IDLE: ("○", "dim"),
    AgentStatus.PARALLEL: ("∥", "magenta"),
}

_URGENCY_STYLES = {
    CountdownUrgency.CALM: "green",
    CountdownUrgency.WARNING: "yellow",
    CountdownUrgency.URGENT: "bold red",
}

_THINKING_PREVIEW = 80


def _truncate(text: str, limit: int) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 1] + "…"


def format_handoff(handoff: HandoffAnimationState, frames: int = 8) -> Text:
    """``planner ──▶ architect`` with the arrow growing as the handoff runs."""
    if not handoff.is_animating:
        return Text()
    shaft = "─" * (handoff.arrow_frame + 1)
    arrow = f"{shaft}▶".ljust(frames + 1)
    style = "dim" if handoff.is_fading else "bold"
    text = Text(style=style)
    text.append(handoff.previous_agent or "", style="green")
    text.append(f" {arrow} ")
    text.append(handoff.current_agent or "", style="cyan")
    return text


def format_status(render: RenderState) -> Text:
    """One-line status: mode, agent, subtasks, usage and activity."""
    text = Text()
    bp = render.breakpoint

    if render.handoff.is_animating and not bp.is_narrow:
        text.append_text(format_handoff(render.handoff))
    elif render.active_agent:
        text.append(render.active_agent, style="bold cyan")
    else:
        text.append("idle", style="dim")

    progress = render.subtask_progress
    if progress is not None and progress.total:
        text.append(f"  {progress.completed}/{progress.total} subtasks")

    if render.is_processing:
        text.append("  working…", style="yellow")

    if bp.is_narrow:
        return text

    if render.preview_mode:
        text.append("  [preview]", style="magenta")
    if render.display_mode is not DisplayMode.NORMAL:
        text.append(f"  [{render.display_mode.value}]", style="dim")
    if render.display_mode is DisplayMode.VERBOSE or bp.is_wide:
        text.append(f"  {render.tokens.total:,} tokens  ${render.cost:.4f}", style="dim")
    return text


def format_agent_line(agent: AgentInfo, render: RenderState) -> Text:
    icon, style = _STATUS_ICONS.get(agent.status, ("?", ""))
    line = Text()
    line.append(f"{icon} ", style=style)
    line.append(agent.name or "(unnamed)", style=style)
    if agent.stage and not render.breakpoint.is_compact:
        line.append(f"  {agent.stage}", style="dim")
    if agent.progress is not None:
        line.append(f"  {agent.progress}%")
    debug = agent.debug_info
    if debug is not None and render.display_mode is DisplayMode.VERBOSE and debug.tokens_used:
        line.append(f"  {debug.tokens_used.total:,} tok", style="dim")
    if debug is not None and render.display_mode is DisplayMode.VERBOSE:
        if debug.turn_count:
            line.append(f"  turn {debug.turn_count}", style="dim")
        if debug.last_tool_call:
            line.append(f"  ⚙ {debug.last_tool_call}", style="dim")
    if debug is not None and render.show_thoughts and debug.thinking:
        line.append("\n    ")
        line.append(_truncate(debug.thinking, _THINKING_PREVIEW), style="dim italic")
    return line


def format_agents(render: RenderState) -> Text:
    """Workflow roster, one agent per line."""
    return Text("\n").join(format_agent_line(a, render) for a in render.agents)


def format_parallel(render: RenderState) -> Text:
    if not render.show_parallel_panel:
        return Text()
    text = Text("Parallel: ", style="bold magenta")
    for i, agent in enumerate(render.parallel_agents):
        if i:
            text.append(", ")
        text.append(agent.name or "(unnamed)")
        if agent.stage:
            text.append(f" ({agent.stage})", style="dim")
    return text


def format_preview(render: RenderState) -> Text:
    """Pending input, its intent, and the countdown coloured by urgency."""
    pending = render.pending_preview
    if pending is None:
        return Text()
    intent = pending.intent
    text = Text()
    text.append("Preview: ", style="bold")
    text.append(pending.input)
    text.append("\nIntent: ")
    text.append(f"{intent.type.value} ({format_percent(intent.confidence)}%)")
    if render.preview_low_confidence:
        text.append("  low confidence", style="bold yellow")

    if render.countdown_seconds is not None:
        style = _URGENCY_STYLES.get(render.countdown_urgency, "")
        text.append(f"\nAuto-executing in {render.countdown_seconds}s", style=style)
    else:
        text.append("\nCountdown cancelled", style="dim")
    text.append("\n[Enter] execute  [Esc] cancel  [e] edit", style="dim")
    return text


class StatusBar(Static):
    """Single-line session status."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $surface-lighten-1;
    }
    """

    def update_from(self, render: RenderState) -> None:
        self.update(format_status(render))


class AgentPanel(Static):
    """Workflow roster; hidden in compact mode and on narrow terminals."""

    DEFAULT_CSS = """
    AgentPanel {
        dock: right;
        width: 32;
        padding: 0 1;
        border-left: solid $surface-lighten-2;
    }
    """

    def update_from(self, render: RenderState) -> None:
        bp = render.breakpoint
        self.display = bool(
            render.agents
            and render.display_mode is not DisplayMode.COMPACT
            and not (bp.is_narrow or bp.is_compact)
        )
        self.update(format_agents(render))


class ParallelPanel(Static):
    DEFAULT_CSS = """
    ParallelPanel {
        height: auto;
        padding: 0 1;
    }
    """

    def update_from(self, render: RenderState) -> None:
        self.display = render.show_parallel_panel
        self.update(format_parallel(render))


class PreviewPanel(Static):
    """Shown only while an input awaits confirmation."""

    DEFAULT_CSS = """
    PreviewPanel {
        height: auto;
        padding: 0 1;
        border: round $warning;
    }
    """

    def update_from(self, render: RenderState) -> None:
        self.display = render.pending_preview is not None
        self.update(format_preview(render))
