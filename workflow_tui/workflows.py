"""Workflow definitions: which agent owns which stage.

The controller only needs ``stage name → agent name``.  Lookups are plain
callables ``(workflow_name) -> WorkflowDefinition`` that may raise; the
synchronizer treats any failure as non-fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import yaml

from .log import logger


class WorkflowLookupError(Exception):
    """A workflow could not be found or parsed."""


@dataclass(frozen=True)
class WorkflowStage:
    name: str
    agent: str


@dataclass(frozen=True)
class WorkflowDefinition:
    name: str
    stages: tuple[WorkflowStage, ...] = field(default_factory=tuple)

    def agent_for(self, stage_name: str) -> str | None:
        """Return the agent responsible for *stage_name*, or None."""
        for stage in self.stages:
            if stage.name == stage_name:
                return stage.agent
        return None

    @classmethod
    def from_dict(cls, name: str, data: object) -> WorkflowDefinition:
        """Build a definition from parsed YAML/JSON data.

        Stage entries without a string ``name`` and ``agent`` are skipped.

        Raises:
            WorkflowLookupError: If *data* has no ``stages`` list.
        """
        if not isinstance(data, dict) or not isinstance(data.get("stages"), list):
            raise WorkflowLookupError(f"Workflow '{name}' has no stages list")
        stages: list[WorkflowStage] = []
        for entry in data["stages"]:
            if not isinstance(entry, dict):
                continue
            stage_name, agent = entry.get("name"), entry.get("agent")
            if isinstance(stage_name, str) and isinstance(agent, str):
                stages.append(WorkflowStage(stage_name, agent))
            else:
                logger.debug("Skipping malformed stage in workflow %s: %r", name, entry)
        return cls(name=str(data.get("name") or name), stages=tuple(stages))


WorkflowLookup = Callable[[str], WorkflowDefinition]


class StaticWorkflowLookup:
    """In-memory lookup over ``{workflow_name: [(stage, agent), ...]}``."""

    def __init__(self, workflows: dict[str, list[tuple[str, str]]]) -> None:
        self._workflows = {
            name: WorkflowDefinition(
                name, tuple(WorkflowStage(s, a) for s, a in stages)
            )
            for name, stages in workflows.items()
        }

    def __call__(self, name: str) -> WorkflowDefinition:
        try:
            return self._workflows[name]
        except KeyError:
            raise WorkflowLookupError(f"Unknown workflow '{name}'") from None


class YamlWorkflowLookup:
    """Load ``<directory>/<name>.yaml`` (or ``.yml``) on demand."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def __call__(self, name: str) -> WorkflowDefinition:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise WorkflowLookupError(f"Invalid workflow name {name!r}")
        for suffix in (".yaml", ".yml"):
            path = self.directory / f"{name}{suffix}"
            if path.exists():
                break
        else:
            raise WorkflowLookupError(f"Workflow '{name}' not found in {self.directory}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise WorkflowLookupError(f"Cannot read workflow '{name}': {exc}") from exc
        return WorkflowDefinition.from_dict(name, data)

    def available(self) -> list[str]:
        """Names of all workflow files in the directory, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(
            {p.stem for p in self.directory.iterdir() if p.suffix in (".yaml", ".yml")}
        )
