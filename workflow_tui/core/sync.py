"""Translate orchestrator events into session-state changes.

Agent state is a pure function of the event stream: nothing here polls the
orchestrator.  Every handler tolerates malformed payloads and lookup
failures by leaving agent state as it was; none of them raise.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable

from ..log import logger
from ..workflows import WorkflowDefinition, WorkflowLookup
from .events import (
    AgentThinking,
    AgentToolUse,
    AgentTransition,
    AgentTurn,
    OrchestratorEvent,
    ParallelStageCompleted,
    ParallelStageStarted,
    SubtaskCompleted,
    SubtaskCreated,
    TaskCompleted,
    TaskFailed,
    TaskStageChanged,
    TaskStarted,
    UsageUpdated,
)
from .models import (
    AgentDebugInfo,
    AgentInfo,
    AgentStatus,
    Message,
    MessageType,
    SessionState,
    SubtaskProgress,
    TokenUsage,
)


def _event_task_id(event: OrchestratorEvent) -> str | None:
    task = getattr(event, "task", None)
    if task is not None:
        return task.id
    if isinstance(event, (SubtaskCreated, SubtaskCompleted)):
        return event.parent_task_id
    return getattr(event, "task_id", None)


def _set_status(agents: list[AgentInfo], name: str, status: AgentStatus) -> list[AgentInfo]:
    """Return *agents* with *name* set to *status*, appending it if missing."""
    found = False
    updated: list[AgentInfo] = []
    for agent in agents:
        if agent.name == name:
            found = True
            agent = replace(agent, status=status)
        updated.append(agent)
    if not found:
        updated.append(AgentInfo(name=name, status=status))
    return updated


def _update_debug(
    agents: list[AgentInfo],
    name: str,
    updater: Callable[[AgentDebugInfo], AgentDebugInfo],
    allow_add: bool = True,
) -> list[AgentInfo]:
    found = False
    updated: list[AgentInfo] = []
    for agent in agents:
        if agent.name == name:
            found = True
            agent = replace(agent, debug_info=updater(agent.debug_info or AgentDebugInfo()))
        updated.append(agent)
    if not found and allow_add:
        updated.append(AgentInfo(name=name, debug_info=updater(AgentDebugInfo())))
    return updated


def _roster_from(workflow: WorkflowDefinition) -> list[AgentInfo]:
    return [AgentInfo(name=s.agent, status=AgentStatus.IDLE, stage=s.name) for s in workflow.stages]


def _merge_roster(current: list[AgentInfo], workflow: WorkflowDefinition) -> list[AgentInfo]:
    """Re-derive the roster from *workflow*, keeping known agents' status."""
    derived = _roster_from(workflow)
    if [a.name for a in current] == [a.name for a in derived]:
        return current
    existing = {a.name: a for a in current}
    merged: list[AgentInfo] = []
    for agent in derived:
        known = existing.get(agent.name)
        if known is not None:
            agent = replace(
                agent,
                status=known.status,
                progress=known.progress,
                debug_info=known.debug_info,
            )
        merged.append(agent)
    return merged


class OrchestratorSynchronizer:
    """Apply orchestrator events to a :class:`SessionState`.

    Args:
        lookup: Resolves a workflow name to its stages; may raise.
        task_id: When set, events for any other task are ignored.
    """

    def __init__(self, lookup: WorkflowLookup | None = None, task_id: str | None = None) -> None:
        self._lookup = lookup
        self._task_id = task_id
        self._workflow_cache: dict[str, WorkflowDefinition] = {}
        self._handlers: dict[type, Callable[[SessionState, OrchestratorEvent], None]] = {
            TaskStarted: self._on_task_started,
            TaskStageChanged: self._on_stage_changed,
            TaskCompleted: self._on_task_finished,
            TaskFailed: self._on_task_finished,
            ParallelStageStarted: self._on_parallel_started,
            ParallelStageCompleted: self._on_parallel_completed,
            SubtaskCreated: self._on_subtask_created,
            SubtaskCompleted: self._on_subtask_completed,
            UsageUpdated: self._on_usage_updated,
            AgentThinking: self._on_agent_thinking,
            AgentToolUse: self._on_agent_tool_use,
            AgentTurn: self._on_agent_turn,
            AgentTransition: self._on_agent_transition,
        }

    def apply(self, state: SessionState, event: OrchestratorEvent) -> bool:
        """Apply *event* to *state*.  Returns False if the event was ignored."""
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.debug("Ignoring unsupported orchestrator event %r", event)
            return False
        if self._task_id and _event_task_id(event) != self._task_id:
            return False
        handler(state, event)
        return True

    # -- Workflow resolution -------------------------------------------------

    def resolve_workflow(self, name: str) -> WorkflowDefinition | None:
        """Look up *name*, caching successes.  Returns None on any failure."""
        cached = self._workflow_cache.get(name)
        if cached is not None:
            return cached
        if self._lookup is None:
            logger.warning("No workflow lookup configured; cannot resolve '%s'", name)
            return None
        try:
            workflow = self._lookup(name)
        except Exception as exc:
            logger.warning("Failed to look up workflow '%s': %s", name, exc)
            return None
        if workflow is None:
            logger.warning("Workflow lookup returned nothing for '%s'", name)
            return None
        self._workflow_cache[name] = workflow
        return workflow

    @staticmethod
    def _note(state: SessionState, text: str) -> None:
        state.messages.append(Message(type=MessageType.SYSTEM, content=text, debug=True))

    # -- Task lifecycle -------------------------------------------------------

    def _on_task_started(self, state: SessionState, event: TaskStarted) -> None:
        state.current_task_id = event.task.id
        state.subtask_progress = SubtaskProgress(completed=0, total=0)
        state.previous_agent = None
        if event.task.workflow:
            workflow = self.resolve_workflow(event.task.workflow)
            if workflow is not None:
                state.agents = _roster_from(workflow)

    def _on_stage_changed(self, state: SessionState, event: TaskStageChanged) -> None:
        workflow_name = event.task.workflow
        workflow = None
        if workflow_name:
            workflow = self.resolve_workflow(workflow_name)
        else:
            logger.warning(
                "Task %s has no workflow; cannot map stage '%s'", event.task.id, event.stage_name
            )
        if workflow is None:
            self._note(
                state,
                f"Could not resolve workflow '{workflow_name}' for stage '{event.stage_name}'",
            )
            return
        agent = workflow.agent_for(event.stage_name)
        if agent is None:
            logger.warning(
                "Stage '%s' not found in workflow '%s'", event.stage_name, workflow_name
            )
            self._note(state, f"Unknown stage '{event.stage_name}' in workflow '{workflow_name}'")
            return

        state.current_task_id = event.task.id
        roster = _merge_roster(state.agents, workflow)
        if agent != state.active_agent:
            prior = state.active_agent
            state.previous_agent = prior
            state.active_agent = agent
            if prior:
                roster = _set_status(roster, prior, AgentStatus.COMPLETED)
        roster = _set_status(roster, agent, AgentStatus.ACTIVE)
        state.agents = roster

    def _on_task_finished(self, state: SessionState, event: TaskCompleted | TaskFailed) -> None:
        if isinstance(event, TaskFailed) and event.error:
            logger.info("Task %s failed: %s", event.task.id, event.error)
        state.subtask_progress = None
        state.active_agent = None
        state.previous_agent = None
        state.parallel_agents = []
        state.show_parallel_panel = False
        state.current_task_id = None

    # -- Parallel stages ------------------------------------------------------

    def _on_parallel_started(self, state: SessionState, event: ParallelStageStarted) -> None:
        stages = event.stage_names or ()
        parallel = [
            AgentInfo(
                name=name or "",
                status=AgentStatus.PARALLEL,
                stage=stages[i] if i < len(stages) else None,
            )
            for i, name in enumerate(event.agent_names or ())
        ]
        state.parallel_agents = parallel
        state.show_parallel_panel = len(parallel) >= 2

    def _on_parallel_completed(self, state: SessionState, event: ParallelStageCompleted) -> None:
        state.parallel_agents = []
        state.show_parallel_panel = False

    # -- Subtasks -------------------------------------------------------------

    def _on_subtask_created(self, state: SessionState, event: SubtaskCreated) -> None:
        progress = state.subtask_progress
        if progress is None:
            state.subtask_progress = SubtaskProgress(completed=0, total=1)
        else:
            state.subtask_progress = replace(progress, total=progress.total + 1)

    def _on_subtask_completed(self, state: SessionState, event: SubtaskCompleted) -> None:
        progress = state.subtask_progress
        if progress is None:
            state.subtask_progress = SubtaskProgress(completed=1, total=1)
        else:
            state.subtask_progress = replace(
                progress, completed=min(progress.total, progress.completed + 1)
            )

    # -- Debug data -----------------------------------------------------------

    def _on_usage_updated(self, state: SessionState, event: UsageUpdated) -> None:
        usage = event.usage
        state.tokens = TokenUsage(input=usage.input_tokens, output=usage.output_tokens)
        state.cost = usage.estimated_cost
        agent = state.active_agent
        if not agent:
            return

        def add_tokens(info: AgentDebugInfo) -> AgentDebugInfo:
            used = info.tokens_used or TokenUsage()
            return replace(
                info,
                tokens_used=TokenUsage(
                    input=used.input + usage.input_tokens,
                    output=used.output + usage.output_tokens,
                ),
            )

        state.agents = _update_debug(state.agents, agent, add_tokens, allow_add=False)

    def _on_agent_thinking(self, state: SessionState, event: AgentThinking) -> None:
        state.agents = _update_debug(
            state.agents,
            event.agent_name,
            lambda info: replace(info, thinking=event.thinking),
            allow_add=bool(event.agent_name),
        )

    def _on_agent_tool_use(self, state: SessionState, event: AgentToolUse) -> None:
        agent = state.active_agent
        if not agent:
            logger.debug("Tool use '%s' with no active agent", event.tool)
            return
        state.agents = _update_debug(
            state.agents,
            agent,
            lambda info: replace(info, last_tool_call=event.tool),
            allow_add=False,
        )

    def _on_agent_turn(self, state: SessionState, event: AgentTurn) -> None:
        state.agents = _update_debug(
            state.agents,
            event.agent_name,
            lambda info: replace(info, turn_count=event.turn_number),
            allow_add=bool(event.agent_name),
        )

    # -- Direct transitions -----------------------------------------------------

    def _on_agent_transition(self, state: SessionState, event: AgentTransition) -> None:
        """Hand over without a workflow lookup; the agents are named directly."""
        agent = event.to_agent
        if not agent:
            logger.warning("Agent transition for task %s has no target agent", event.task_id)
            return
        state.current_task_id = event.task_id
        roster = state.agents
        if agent != state.active_agent:
            prior = event.from_agent or state.active_agent
            state.previous_agent = prior
            state.active_agent = agent
            if prior:
                roster = _set_status(roster, prior, AgentStatus.COMPLETED)
        roster = _set_status(roster, agent, AgentStatus.ACTIVE)
        state.agents = _update_debug(
            roster,
            agent,
            lambda info: replace(info, stage_started_at=datetime.now()),
        )
