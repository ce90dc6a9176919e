"""Shared test fixtures for workflow-tui test suite."""

from __future__ import annotations

import pytest

from workflow_tui.core.controller import SessionController
from workflow_tui.core.events import TaskRef
from workflow_tui.core.scheduler import ManualScheduler
from workflow_tui.workflows import StaticWorkflowLookup


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def lookup() -> StaticWorkflowLookup:
    """A four-stage feature workflow plus a two-stage review workflow."""
    return StaticWorkflowLookup(
        {
            "feature": [
                ("planning", "planner"),
                ("architecture", "architect"),
                ("implementation", "developer"),
                ("testing", "tester"),
            ],
            "review": [
                ("review", "reviewer"),
                ("testing", "tester"),
            ],
        }
    )


@pytest.fixture
def task() -> TaskRef:
    return TaskRef(id="t1", workflow="feature", description="Add login")


@pytest.fixture
def recorder():
    """Callbacks that record what the controller routed to them."""

    class Recorder:
        def __init__(self) -> None:
            self.commands: list[tuple[str, tuple[str, ...]]] = []
            self.tasks: list[str] = []

        def on_command(self, command, args) -> None:
            self.commands.append((command, tuple(args)))

        def on_task(self, text: str) -> None:
            self.tasks.append(text)

    return Recorder()


@pytest.fixture
def controller(scheduler, lookup, recorder):
    ctl = SessionController(
        scheduler,
        on_command=recorder.on_command,
        on_task=recorder.on_task,
        workflow_lookup=lookup,
    )
    yield ctl
    ctl.dispose()

