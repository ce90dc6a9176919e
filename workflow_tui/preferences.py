"""User preferences for Workflow TUI.

Loads preview, display and animation settings from
~/.workflow-tui/preferences.yaml.  Falls back to sensible defaults if the
file doesn't exist or is invalid, and creates a commented default file on
first run so users can discover and edit it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_PREVIEW_TIMEOUT_MS,
    HANDOFF_DURATION_MS,
    HANDOFF_FRAME_INTERVAL_MS,
)
from .core.models import DisplayMode, PreviewConfig
from .log import logger

PREFS_PATH = Path.home() / ".workflow-tui" / "preferences.yaml"

_DEFAULT_YAML = """\
# Workflow TUI Preferences
# Delete this file to reset to defaults.

preview:
  enabled: false                       # show a preview before executing input
  confidence_threshold: 0.8            # below this the preview is flagged low-confidence
  auto_execute_high_confidence: false  # skip the preview when confidence >= 95%
  timeout_seconds: 5                   # countdown before a preview auto-executes

display:
  mode: normal                         # normal | compact | verbose
  show_thoughts: false                 # show agent reasoning in the agent panel

handoff:
  duration_ms: 2000                    # length of the agent handoff animation
  frame_interval_ms: 100               # animation tick

workflows:
  directory: ".workflow-tui/workflows" # <name>.yaml files with stages: [{name, agent}]
"""


@dataclass
class PreviewPreferences:
    """Settings for the input preview and countdown."""

    enabled: bool = False
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    auto_execute_high_confidence: bool = False
    timeout_ms: int = DEFAULT_PREVIEW_TIMEOUT_MS


@dataclass
class DisplayPreferences:
    mode: DisplayMode = DisplayMode.NORMAL
    show_thoughts: bool = False


@dataclass
class HandoffPreferences:
    duration_ms: int = HANDOFF_DURATION_MS
    frame_interval_ms: int = HANDOFF_FRAME_INTERVAL_MS


@dataclass
class Preferences:
    """Top-level TUI preferences."""

    preview: PreviewPreferences = field(default_factory=PreviewPreferences)
    display: DisplayPreferences = field(default_factory=DisplayPreferences)
    handoff: HandoffPreferences = field(default_factory=HandoffPreferences)
    workflows_dir: str = ".workflow-tui/workflows"

    def preview_config(self) -> PreviewConfig:
        return PreviewConfig(
            confidence_threshold=self.preview.confidence_threshold,
            auto_execute_high_confidence=self.preview.auto_execute_high_confidence,
            timeout_ms=self.preview.timeout_ms,
        )


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if isinstance(data.get("preview"), dict):
                pdata = data["preview"]
                if "enabled" in pdata:
                    prefs.preview.enabled = bool(pdata["enabled"])
                if "confidence_threshold" in pdata:
                    prefs.preview.confidence_threshold = float(pdata["confidence_threshold"])
                if "auto_execute_high_confidence" in pdata:
                    prefs.preview.auto_execute_high_confidence = bool(
                        pdata["auto_execute_high_confidence"]
                    )
                if "timeout_seconds" in pdata:
                    prefs.preview.timeout_ms = int(float(pdata["timeout_seconds"]) * 1000)
            if isinstance(data.get("display"), dict):
                ddata = data["display"]
                if "mode" in ddata:
                    prefs.display.mode = DisplayMode.parse(str(ddata["mode"]))
                if "show_thoughts" in ddata:
                    prefs.display.show_thoughts = bool(ddata["show_thoughts"])
            if isinstance(data.get("handoff"), dict):
                hdata = data["handoff"]
                if "duration_ms" in hdata:
                    prefs.handoff.duration_ms = int(hdata["duration_ms"])
                if "frame_interval_ms" in hdata:
                    prefs.handoff.frame_interval_ms = int(hdata["frame_interval_ms"])
            if isinstance(data.get("workflows"), dict):
                wdata = data["workflows"]
                if wdata.get("directory"):
                    prefs.workflows_dir = str(wdata["directory"])
        except Exception:
            logger.debug("Invalid preferences file %s, using defaults", path, exc_info=True)
            prefs = Preferences()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("Could not write default preferences to %s", path, exc_info=True)

    return prefs


def _save_value(section: str, key: str, value: str, path: Path | None = None) -> None:
    """Set ``section.key`` to the literal YAML *value* in the preferences file.

    Surgically updates only that line, preserving the rest of the file
    (including user comments) as-is.  Missing keys and sections are added.
    """
    path = path or PREFS_PATH
    try:
        if path.exists():
            text = path.read_text()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = _DEFAULT_YAML

        section_match = re.search(rf"^{section}:[^\n]*\n((?:[ \t]+[^\n]*\n?|\n)*)", text, re.MULTILINE)
        if section_match is None:
            text = text.rstrip() + f"\n\n{section}:\n  {key}: {value}\n"
        else:
            body = section_match.group(1)
            key_pattern = rf"^(\s+{key}:)[ \t]*(?:\"[^\"]*\"|[^\s#]+)?([ \t]*#.*)?$"
            if re.search(key_pattern, body, re.MULTILINE):
                new_body = re.sub(
                    key_pattern,
                    lambda m: f"{m.group(1)} {value}{m.group(2) or ''}",
                    body,
                    count=1,
                    flags=re.MULTILINE,
                )
            else:
                new_body = f"  {key}: {value}\n" + body
            start, end = section_match.span(1)
            text = text[:start] + new_body + text[end:]

        path.write_text(text)
    except OSError:
        logger.debug("Could not save %s.%s to %s", section, key, path, exc_info=True)


def save_display_mode(mode: DisplayMode, path: Path | None = None) -> None:
    _save_value("display", "mode", mode.value, path)


def save_show_thoughts(enabled: bool, path: Path | None = None) -> None:
    _save_value("display", "show_thoughts", "true" if enabled else "false", path)


def save_preview_enabled(enabled: bool, path: Path | None = None) -> None:
    _save_value("preview", "enabled", "true" if enabled else "false", path)


def save_preview_config(config: PreviewConfig, path: Path | None = None) -> None:
    """Persist threshold, auto-execute flag and timeout together."""
    _save_value("preview", "confidence_threshold", repr(float(config.confidence_threshold)), path)
    _save_value(
        "preview",
        "auto_execute_high_confidence",
        "true" if config.auto_execute_high_confidence else "false",
        path,
    )
    _save_value("preview", "timeout_seconds", f"{config.timeout_ms / 1000:g}", path)
