"""Orchestrator events consumed by the session controller.

The orchestrator speaks in named emitter events (``task:stage-changed`` and
friends).  Inside the TUI each one is a frozen dataclass; adding a new kind
means adding a class here and a handler in :mod:`.sync`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class TaskRef:
    """The slice of an orchestrator task the controller cares about."""

    id: str
    workflow: str = ""
    description: str = ""


@dataclass(frozen=True)
class SubtaskRef:
    id: str
    description: str = ""


@dataclass(frozen=True)
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float = 0.0


@dataclass(frozen=True)
class TaskStarted:
    task: TaskRef


@dataclass(frozen=True)
class TaskStageChanged:
    task: TaskRef
    stage_name: str


@dataclass(frozen=True)
class TaskCompleted:
    task: TaskRef


@dataclass(frozen=True)
class TaskFailed:
    task: TaskRef
    error: str = ""


@dataclass(frozen=True)
class ParallelStageStarted:
    task_id: str
    stage_names: tuple[str, ...] = ()
    agent_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParallelStageCompleted:
    task_id: str


@dataclass(frozen=True)
class SubtaskCreated:
    subtask: SubtaskRef
    parent_task_id: str


@dataclass(frozen=True)
class SubtaskCompleted:
    subtask: SubtaskRef
    parent_task_id: str


@dataclass(frozen=True)
class UsageUpdated:
    task_id: str
    usage: Usage


@dataclass(frozen=True)
class AgentThinking:
    task_id: str
    agent_name: str
    thinking: str


@dataclass(frozen=True)
class AgentToolUse:
    """The active agent called *tool*; the input is kept for logging only."""

    task_id: str
    tool: str
    tool_input: Any = None


@dataclass(frozen=True)
class AgentTurn:
    task_id: str
    agent_name: str
    turn_number: int


@dataclass(frozen=True)
class AgentTransition:
    """Direct hand-over from *from_agent* (None for the first) to *to_agent*."""

    task_id: str
    from_agent: str | None
    to_agent: str


OrchestratorEvent = Union[
    TaskStarted,
    TaskStageChanged,
    TaskCompleted,
    TaskFailed,
    ParallelStageStarted,
    ParallelStageCompleted,
    SubtaskCreated,
    SubtaskCompleted,
    UsageUpdated,
    AgentThinking,
    AgentToolUse,
    AgentTurn,
    AgentTransition,
]


# -- Wire adapter ---------------------------------------------------------------


def _task(value: Any) -> TaskRef:
    if isinstance(value, TaskRef):
        return value
    if isinstance(value, dict):
        return TaskRef(
            id=str(value.get("id") or ""),
            workflow=str(value.get("workflow") or ""),
            description=str(value.get("description") or ""),
        )
    return TaskRef(
        id=str(getattr(value, "id", "") or ""),
        workflow=str(getattr(value, "workflow", "") or ""),
        description=str(getattr(value, "description", "") or ""),
    )


def _subtask(value: Any) -> SubtaskRef:
    if isinstance(value, SubtaskRef):
        return value
    if isinstance(value, dict):
        return SubtaskRef(
            id=str(value.get("id") or ""),
            description=str(value.get("description") or ""),
        )
    return SubtaskRef(id=str(getattr(value, "id", "") or ""))


def _usage(value: Any) -> Usage:
    if isinstance(value, Usage):
        return value
    data = value if isinstance(value, dict) else {}
    return Usage(
        input_tokens=int(data.get("inputTokens", data.get("input_tokens", 0)) or 0),
        output_tokens=int(data.get("outputTokens", data.get("output_tokens", 0)) or 0),
        estimated_cost=float(
            data.get("estimatedCost", data.get("estimated_cost", 0.0)) or 0.0
        ),
    )


def _names(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple("" if v is None else str(v) for v in value)


def _error_text(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "message", value))

def _turn(value: Any) -> AgentTurn:
    data = value if isinstance(value, dict) else {}
    return AgentTurn(
        task_id=str(data.get("taskId", data.get("task_id", "")) or ""),
        agent_name=str(data.get("agentName", data.get("agent_name", "")) or ""),
        turn_number=int(data.get("turnNumber", data.get("turn_number", 0)) or 0),
    )



_WIRE_BUILDERS = {
    "task:started": lambda task: TaskStarted(_task(task)),
    "task:stage-changed": lambda task, stage: TaskStageChanged(
        _task(task), "" if stage is None else str(stage)
    ),
    "task:completed": lambda task: TaskCompleted(_task(task)),
    "task:failed": lambda task, error=None: TaskFailed(_task(task), _error_text(error)),
    "stage:parallel-started": lambda task_id, stages=None, agents=None: (
        ParallelStageStarted(str(task_id), _names(stages), _names(agents))
    ),
    "stage:parallel-completed": lambda task_id: ParallelStageCompleted(str(task_id)),
    "subtask:created": lambda subtask, parent: SubtaskCreated(_subtask(subtask), str(parent)),
    "subtask:completed": lambda subtask, parent: SubtaskCompleted(
        _subtask(subtask), str(parent)
    ),
    "usage:updated": lambda task_id, usage: UsageUpdated(str(task_id), _usage(usage)),
    "agent:thinking": lambda task_id, agent, thinking: AgentThinking(
        str(task_id), "" if agent is None else str(agent), str(thinking or "")
    ),
    "agent:tool-use": lambda task_id, tool, tool_input=None: AgentToolUse(
        str(task_id), "" if tool is None else str(tool), tool_input
    ),
    "agent:turn": _turn,
    "agent:transition": lambda task_id, from_agent, to_agent: AgentTransition(
        str(task_id),
        str(from_agent) if from_agent else None,
        "" if to_agent is None else str(to_agent),
    ),
}

EVENT_NAMES: tuple[str, ...] = tuple(_WIRE_BUILDERS)


def event_from_wire(name: str, *args: Any) -> OrchestratorEvent:
    """Build an event from an emitter-style ``(name, *args)`` notification.

    Raises:
        ValueError: If *name* is not a known orchestrator event.
    """
    builder = _WIRE_BUILDERS.get(name)
    if builder is None:
        raise ValueError(f"Unknown orchestrator event '{name}'")
    return builder(*args)
