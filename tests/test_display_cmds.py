"""Tests for /compact, /verbose, /thoughts and /clear."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from workflow_tui.core.controller import SessionController
from workflow_tui.core.models import DisplayMode, Intent, IntentType, MessageType


def _run(ctl: SessionController, text: str) -> None:
    ctl.submit(text, Intent(IntentType.COMMAND, 1.0))


def _last(ctl: SessionController):
    return ctl.state.messages[-1]


class TestDisplayModeCommands:
    def test_compact_toggles_with_normal(self, controller):
        _run(controller, "/compact")
        assert controller.state.display_mode is DisplayMode.COMPACT
        assert _last(controller).content == (
            "Display mode set to compact: Single-line status, condensed output"
        )
        _run(controller, "/compact")
        assert controller.state.display_mode is DisplayMode.NORMAL
        assert _last(controller).content == (
            "Display mode set to normal: Standard display with all components shown"
        )

    def test_verbose_toggles_with_normal(self, controller):
        _run(controller, "/verbose")
        assert controller.state.display_mode is DisplayMode.VERBOSE
        assert _last(controller).content == (
            "Display mode set to verbose: Detailed debug output, full information"
        )
        _run(controller, "/verbose")
        assert controller.state.display_mode is DisplayMode.NORMAL

    def test_compact_from_verbose(self, controller):
        _run(controller, "/verbose")
        _run(controller, "/compact")
        assert controller.state.display_mode is DisplayMode.COMPACT

    def test_mode_persisted_when_path_given(self, scheduler, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        with SessionController(scheduler, preferences_path=path) as ctl:
            _run(ctl, "/verbose")
        data = yaml.safe_load(path.read_text())
        assert data["display"]["mode"] == "verbose"


class TestThoughtsCommand:
    def test_toggle(self, controller):
        _run(controller, "/thoughts")
        assert controller.state.show_thoughts is True
        assert _last(controller).content == (
            "Thought visibility enabled: AI reasoning will be shown"
        )
        _run(controller, "/thoughts toggle")
        assert controller.state.show_thoughts is False
        assert _last(controller).content == (
            "Thought visibility disabled: AI reasoning will be hidden"
        )

    @pytest.mark.parametrize("arg, expected", [("on", True), ("off", False), ("ON", True)])
    def test_explicit(self, controller, arg, expected):
        _run(controller, f"/thoughts {arg}")
        assert controller.state.show_thoughts is expected

    def test_status(self, controller):
        _run(controller, "/thoughts status")
        msg = _last(controller)
        assert msg.type is MessageType.ASSISTANT
        assert msg.content == "Thought visibility is currently disabled."

    def test_invalid_argument(self, controller):
        _run(controller, "/thoughts maybe")
        msg = _last(controller)
        assert msg.type is MessageType.ERROR
        assert msg.content == "Usage: /thoughts [on|off|toggle|status]"
        assert controller.state.show_thoughts is False


class TestClearCommand:
    def test_clear_empties_messages(self, controller):
        controller.add_message(MessageType.USER, "hello")
        controller.add_message(MessageType.ASSISTANT, "hi")
        _run(controller, "/clear")
        assert controller.state.messages == []
