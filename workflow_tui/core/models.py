"""Session data model: messages, intents, agents and the session aggregate."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..constants import DEFAULT_CONFIDENCE_THRESHOLD, DEFAULT_PREVIEW_TIMEOUT_MS


class DisplayMode(Enum):
    NORMAL = "normal"
    COMPACT = "compact"
    VERBOSE = "verbose"

    @classmethod
    def parse(cls, value: str | None) -> DisplayMode:
        """Return the mode named *value*, falling back to ``NORMAL``."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NORMAL


class MessageType(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    SYSTEM = "system"
    ERROR = "error"


class IntentType(Enum):
    COMMAND = "command"
    TASK = "task"
    QUESTION = "question"
    CLARIFICATION = "clarification"


class AgentStatus(Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    WAITING = "waiting"
    IDLE = "idle"
    PARALLEL = "parallel"


_message_ids = itertools.count(1)


@dataclass(frozen=True)
class Message:
    """A single entry in the session's message list."""

    type: MessageType
    content: str
    agent: str | None = None
    tool_name: str | None = None
    debug: bool = False  # internal note, shown only in verbose mode
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: f"msg_{next(_message_ids)}")


@dataclass(frozen=True)
class Intent:
    """Classified meaning of an input line.

    ``confidence`` is taken as-is: values outside [0, 1], infinities and
    NaN are all legal and handled by the decision policy.
    """

    type: IntentType
    confidence: float
    command: str | None = None
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class TokenUsage:
    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output


@dataclass(frozen=True)
class AgentDebugInfo:
    thinking: str | None = None
    tokens_used: TokenUsage | None = None
    last_tool_call: str | None = None
    turn_count: int | None = None
    stage_started_at: datetime | None = None


@dataclass(frozen=True)
class AgentInfo:
    """An agent as shown in the roster or the parallel panel."""

    name: str
    status: AgentStatus = AgentStatus.IDLE
    stage: str | None = None
    progress: int | None = None  # 0-100
    debug_info: AgentDebugInfo | None = None


@dataclass(frozen=True)
class SubtaskProgress:
    completed: int = 0
    total: int = 0


@dataclass(frozen=True)
class PreviewConfig:
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    auto_execute_high_confidence: bool = False
    timeout_ms: int = DEFAULT_PREVIEW_TIMEOUT_MS


@dataclass(frozen=True)
class PendingPreview:
    """An input awaiting confirmation, timeout execution or cancellation."""

    input: str
    intent: Intent
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class SessionState:
    """The mutable session aggregate.

    Owned and mutated only by :class:`~workflow_tui.core.controller.SessionController`;
    everything else sees :class:`~workflow_tui.core.render.RenderState` snapshots.
    """

    display_mode: DisplayMode = DisplayMode.NORMAL
    messages: list[Message] = field(default_factory=list)
    active_agent: str | None = None
    previous_agent: str | None = None
    agents: list[AgentInfo] = field(default_factory=list)
    parallel_agents: list[AgentInfo] = field(default_factory=list)
    show_parallel_panel: bool = False
    subtask_progress: SubtaskProgress | None = None
    current_task_id: str | None = None
    pending_preview: PendingPreview | None = None
    remaining_ms: int | None = None
    preview_mode: bool = False
    preview_config: PreviewConfig = field(default_factory=PreviewConfig)
    show_thoughts: bool = False
    is_processing: bool = False
    edit_mode_input: str | None = None
    tokens: TokenUsage = field(default_factory=TokenUsage)
    cost: float = 0.0
    terminal_width: int | None = None
