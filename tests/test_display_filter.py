"""Tests for workflow_tui.core.display_filter."""

from __future__ import annotations

from workflow_tui.core.display_filter import is_visible, visible_messages
from workflow_tui.core.models import DisplayMode, Message, MessageType


def _one_of_each() -> list[Message]:
    return [Message(type=t, content=t.value) for t in MessageType]


class TestIsVisible:
    def test_compact_hides_system_and_tool(self):
        shown = [m.type for m in _one_of_each() if is_visible(m, DisplayMode.COMPACT)]
        assert shown == [MessageType.USER, MessageType.ASSISTANT, MessageType.ERROR]

    def test_verbose_shows_all_five_types(self):
        messages = _one_of_each()
        assert all(is_visible(m, DisplayMode.VERBOSE) for m in messages)
        assert len(messages) == 5

    def test_normal_shows_all_types(self):
        assert all(is_visible(m, DisplayMode.NORMAL) for m in _one_of_each())

    def test_debug_notes_only_in_verbose(self):
        note = Message(type=MessageType.SYSTEM, content="lookup failed", debug=True)
        assert is_visible(note, DisplayMode.VERBOSE) is True
        assert is_visible(note, DisplayMode.NORMAL) is False
        assert is_visible(note, DisplayMode.COMPACT) is False


class TestVisibleMessages:
    def test_windows_to_last_twenty(self):
        messages = [Message(type=MessageType.USER, content=str(i)) for i in range(30)]
        result = visible_messages(messages, DisplayMode.NORMAL)
        assert [m.content for m in result] == [str(i) for i in range(10, 30)]

    def test_window_applied_before_filter(self):
        """Filtered-out recent messages are not back-filled with older ones."""
        old = [Message(type=MessageType.USER, content=f"old{i}") for i in range(5)]
        recent = [Message(type=MessageType.SYSTEM, content=f"sys{i}") for i in range(20)]
        result = visible_messages(old + recent, DisplayMode.COMPACT)
        assert result == ()

    def test_returns_tuple(self):
        assert isinstance(visible_messages([], DisplayMode.NORMAL), tuple)

    def test_custom_window(self):
        messages = [Message(type=MessageType.USER, content=str(i)) for i in range(5)]
        assert [m.content for m in visible_messages(messages, DisplayMode.NORMAL, window=2)] == [
            "3",
            "4",
        ]
