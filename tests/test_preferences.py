"""Tests for workflow_tui.preferences.

Covers load_preferences defaults and parsing, and the save_* functions
that edit single keys in place.  All file I/O uses tmp_path so nothing
touches the real user config.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from workflow_tui.core.models import DisplayMode, PreviewConfig
from workflow_tui.preferences import (
    Preferences,
    load_preferences,
    save_display_mode,
    save_preview_config,
    save_preview_enabled,
    save_show_thoughts,
)


# -- load_preferences --------------------------------------------------------


class TestLoadPreferencesDefaults:
    """When no file exists, load_preferences returns sensible defaults."""

    def test_defaults_when_no_file(self, tmp_path: Path):
        prefs = load_preferences(tmp_path / "nonexistent.yaml")
        assert prefs.preview.enabled is False
        assert prefs.preview.confidence_threshold == 0.8
        assert prefs.preview.auto_execute_high_confidence is False
        assert prefs.preview.timeout_ms == 5000
        assert prefs.display.mode is DisplayMode.NORMAL
        assert prefs.display.show_thoughts is False
        assert prefs.handoff.duration_ms == 2000
        assert prefs.handoff.frame_interval_ms == 100

    def test_creates_default_file(self, tmp_path: Path):
        path = tmp_path / "sub" / "prefs.yaml"
        load_preferences(path)
        assert path.exists()
        data = yaml.safe_load(path.read_text())
        assert data["display"]["mode"] == "normal"

    def test_default_file_round_trips(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        first = load_preferences(path)
        second = load_preferences(path)
        assert first == second


class TestLoadPreferencesParsing:
    def test_reads_all_sections(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text(
            "preview:\n"
            "  enabled: true\n"
            "  confidence_threshold: 0.6\n"
            "  auto_execute_high_confidence: true\n"
            "  timeout_seconds: 2.5\n"
            "display:\n"
            "  mode: compact\n"
            "  show_thoughts: true\n"
            "handoff:\n"
            "  duration_ms: 1000\n"
            "  frame_interval_ms: 50\n"
            "workflows:\n"
            "  directory: /srv/workflows\n"
        )
        prefs = load_preferences(path)
        assert prefs.preview.enabled is True
        assert prefs.preview.confidence_threshold == 0.6
        assert prefs.preview.auto_execute_high_confidence is True
        assert prefs.preview.timeout_ms == 2500
        assert prefs.display.mode is DisplayMode.COMPACT
        assert prefs.display.show_thoughts is True
        assert prefs.handoff.duration_ms == 1000
        assert prefs.handoff.frame_interval_ms == 50
        assert prefs.workflows_dir == "/srv/workflows"

    def test_partial_file_keeps_other_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("display:\n  mode: verbose\n")
        prefs = load_preferences(path)
        assert prefs.display.mode is DisplayMode.VERBOSE
        assert prefs.preview.timeout_ms == 5000

    def test_unknown_mode_falls_back_to_normal(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("display:\n  mode: psychedelic\n")
        assert load_preferences(path).display.mode is DisplayMode.NORMAL

    def test_invalid_yaml_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("preview: [unclosed\n")
        assert load_preferences(path) == Preferences()

    def test_bad_value_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("preview:\n  timeout_seconds: soon\n")
        assert load_preferences(path) == Preferences()

    def test_preview_config(self):
        prefs = Preferences()
        prefs.preview.timeout_ms = 9000
        assert prefs.preview_config() == PreviewConfig(timeout_ms=9000)


# -- save_* --------------------------------------------------------------------


class TestSaveFunctions:
    def test_save_display_mode_preserves_comments(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        save_display_mode(DisplayMode.COMPACT, path)
        text = path.read_text()
        assert "# normal | compact | verbose" in text
        assert load_preferences(path).display.mode is DisplayMode.COMPACT

    def test_save_show_thoughts(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        save_show_thoughts(True, path)
        assert load_preferences(path).display.show_thoughts is True

    def test_save_preview_enabled_creates_file(self, tmp_path: Path):
        path = tmp_path / "new" / "prefs.yaml"
        save_preview_enabled(True, path)
        assert load_preferences(path).preview.enabled is True

    def test_save_preview_config(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        save_preview_config(
            PreviewConfig(
                confidence_threshold=0.55, auto_execute_high_confidence=True, timeout_ms=1500
            ),
            path,
        )
        prefs = load_preferences(path)
        assert prefs.preview.confidence_threshold == 0.55
        assert prefs.preview.auto_execute_high_confidence is True
        assert prefs.preview.timeout_ms == 1500

    def test_missing_key_is_added(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("display:\n  mode: verbose\n")
        save_show_thoughts(True, path)
        prefs = load_preferences(path)
        assert prefs.display.show_thoughts is True
        assert prefs.display.mode is DisplayMode.VERBOSE

    def test_missing_section_is_added(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("display:\n  mode: verbose\n")
        save_preview_enabled(True, path)
        assert load_preferences(path).preview.enabled is True

    def test_only_target_section_changes(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("preview:\n  enabled: false\ndisplay:\n  show_thoughts: false\n")
        save_preview_enabled(True, path)
        data = yaml.safe_load(path.read_text())
        assert data == {"preview": {"enabled": True}, "display": {"show_thoughts": False}}
