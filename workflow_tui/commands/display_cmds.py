"""Display and UI preference commands."""

from __future__ import annotations

from ..constants import DISPLAY_MODE_MESSAGES
from ..core.models import DisplayMode, MessageType
from ..preferences import save_display_mode, save_show_thoughts


class DisplayCommandsMixin:
    """Display and UI preference commands."""

    def _cmd_compact(self, text: str) -> None:
        """Toggle between compact and normal display."""
        if self.state.display_mode is DisplayMode.COMPACT:
            self._set_display_mode(DisplayMode.NORMAL)
        else:
            self._set_display_mode(DisplayMode.COMPACT)

    def _cmd_verbose(self, text: str) -> None:
        """Toggle between verbose and normal display."""
        if self.state.display_mode is DisplayMode.VERBOSE:
            self._set_display_mode(DisplayMode.NORMAL)
        else:
            self._set_display_mode(DisplayMode.VERBOSE)

    def _set_display_mode(self, mode: DisplayMode) -> None:
        self.state.display_mode = mode
        self._persist(save_display_mode, mode)
        self._add_system_message(DISPLAY_MODE_MESSAGES[mode.value])

    def _cmd_thoughts(self, text: str) -> None:
        """Show or hide agent reasoning.

        /thoughts          Toggle
        /thoughts on|off   Set explicitly
        /thoughts status   Report the current setting
        """
        arg = text.strip().lower()

        if arg == "status":
            state = "enabled" if self.state.show_thoughts else "disabled"
            self.add_message(
                MessageType.ASSISTANT, f"Thought visibility is currently {state}."
            )
            return

        if arg == "on":
            show = True
        elif arg == "off":
            show = False
        elif arg in ("", "toggle"):
            show = not self.state.show_thoughts
        else:
            self.add_message(MessageType.ERROR, "Usage: /thoughts [on|off|toggle|status]")
            return

        self.state.show_thoughts = show
        self._persist(save_show_thoughts, show)
        if show:
            self._add_system_message("Thought visibility enabled: AI reasoning will be shown")
        else:
            self._add_system_message("Thought visibility disabled: AI reasoning will be hidden")

    def _cmd_clear(self, text: str) -> None:
        self.state.messages.clear()
        # No system message needed - the log is cleared
