"""Tests for the orchestrator wire-name adapter."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from workflow_tui.core.events import (
    EVENT_NAMES,
    AgentThinking,
    AgentToolUse,
    AgentTransition,
    AgentTurn,
    ParallelStageStarted,
    SubtaskCompleted,
    TaskFailed,
    TaskRef,
    TaskStageChanged,
    TaskStarted,
    Usage,
    UsageUpdated,
    event_from_wire,
)


class TestEventFromWire:
    def test_task_from_dict(self):
        event = event_from_wire("task:started", {"id": "t1", "workflow": "feature"})
        assert event == TaskStarted(TaskRef(id="t1", workflow="feature"))

    def test_task_from_object(self):
        task = SimpleNamespace(id="t1", workflow="feature", description="Add login")
        event = event_from_wire("task:stage-changed", task, "planning")
        assert isinstance(event, TaskStageChanged)
        assert event.task.description == "Add login"
        assert event.stage_name == "planning"

    def test_failed_accepts_exception(self):
        event = event_from_wire("task:failed", {"id": "t1"}, RuntimeError("boom"))
        assert event == TaskFailed(TaskRef(id="t1"), "boom")

    def test_failed_without_error(self):
        assert event_from_wire("task:failed", {"id": "t1"}).error == ""

    def test_parallel_none_names_become_empty(self):
        event = event_from_wire("stage:parallel-started", "t1", ["testing"], ["tester", None])
        assert event == ParallelStageStarted("t1", ("testing",), ("tester", ""))

    def test_subtask_completed(self):
        event = event_from_wire("subtask:completed", {"id": "s1"}, "t1")
        assert isinstance(event, SubtaskCompleted)
        assert event.parent_task_id == "t1"

    def test_usage_camel_case(self):
        event = event_from_wire(
            "usage:updated", "t1", {"inputTokens": 10, "outputTokens": 5, "estimatedCost": 0.02}
        )
        assert event == UsageUpdated("t1", Usage(10, 5, 0.02))

    def test_usage_snake_case(self):
        event = event_from_wire("usage:updated", "t1", {"input_tokens": 3, "output_tokens": 4})
        assert event.usage == Usage(3, 4, 0.0)

    def test_agent_thinking(self):
        event = event_from_wire("agent:thinking", "t1", "planner", "Considering options")
        assert event == AgentThinking("t1", "planner", "Considering options")

    def test_agent_tool_use(self):
        event = event_from_wire("agent:tool-use", "t1", "read_file", {"path": "a.py"})
        assert event == AgentToolUse("t1", "read_file", {"path": "a.py"})

    def test_agent_turn_from_payload(self):
        event = event_from_wire(
            "agent:turn", {"taskId": "t1", "agentName": "developer", "turnNumber": 3}
        )
        assert event == AgentTurn("t1", "developer", 3)

    def test_agent_transition(self):
        assert event_from_wire("agent:transition", "t1", None, "planner") == AgentTransition(
            "t1", None, "planner"
        )
        assert event_from_wire("agent:transition", "t1", "planner", "architect").from_agent == (
            "planner"
        )

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown orchestrator event"):
            event_from_wire("task:exploded", {"id": "t1"})

    def test_every_name_is_listed(self):
        assert "task:stage-changed" in EVENT_NAMES
        assert "agent:thinking" in EVENT_NAMES
        assert "agent:transition" in EVENT_NAMES
        assert len(EVENT_NAMES) == 13
