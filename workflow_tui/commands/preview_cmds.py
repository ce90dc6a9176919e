"""Preview mode and auto-execute configuration commands."""

from __future__ import annotations

import math
import re
from dataclasses import replace

from ..core.auto_execute import format_percent
from ..core.models import MessageType
from ..preferences import save_preview_config, save_preview_enabled

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_threshold(value: str) -> float | None:
    """Read *value* as a 0-1 fraction or, above 1, a 0-100 percentage."""
    try:
        parsed = float(value)
    except ValueError:
        return None
    if math.isnan(parsed):
        return None
    return parsed / 100 if parsed > 1 else parsed


def _parse_timeout(value: str) -> int | None:
    """Leading integer of *value* (``"7s"`` → 7), or None."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _seconds(timeout_ms: int) -> str:
    return f"{timeout_ms / 1000:g}"


class PreviewCommandsMixin:
    """``/preview`` and its subcommands."""

    def _cmd_preview(self, text: str) -> None:
        """Configure the input preview.

        /preview [toggle]            Toggle preview mode
        /preview on|off              Set preview mode
        /preview status|settings     Show all preview settings
        /preview confidence [N]      Show or set the low-confidence threshold
        /preview timeout [N]         Show or set the countdown, in seconds
        /preview auto [on|off]       Show or set auto-execute for >= 95%
        """
        parts = text.split()
        sub = parts[0].lower() if parts else "toggle"
        value = parts[1] if len(parts) > 1 else None

        if sub == "on":
            self._set_preview_mode(True)
            self._add_system_message(
                "Preview mode enabled. You will see a preview before each execution."
            )
        elif sub == "off":
            self._set_preview_mode(False)
            self._add_system_message("Preview mode disabled.")
        elif sub == "toggle":
            enabled = not self.state.preview_mode
            self._set_preview_mode(enabled)
            self._add_system_message(f"Preview mode {'enabled' if enabled else 'disabled'}.")
        elif sub in ("status", "settings"):
            self._preview_status()
        elif sub == "confidence":
            self._preview_confidence(value)
        elif sub == "timeout":
            self._preview_timeout(value)
        elif sub == "auto":
            self._preview_auto(value)
        else:
            self.add_message(
                MessageType.ERROR,
                "Usage: /preview [on|off|toggle|status|settings|confidence|timeout|auto]",
            )

    def _set_preview_mode(self, enabled: bool) -> None:
        self.state.preview_mode = enabled
        self._clear_preview()
        self._persist(save_preview_enabled, enabled)

    def _preview_status(self) -> None:
        config = self.state.preview_config
        self.add_message(
            MessageType.ASSISTANT,
            "Preview Settings:\n"
            f"• Mode: {'enabled' if self.state.preview_mode else 'disabled'}\n"
            f"• Confidence threshold: {format_percent(config.confidence_threshold)}%\n"
            "• Auto-execute high confidence: "
            f"{'enabled' if config.auto_execute_high_confidence else 'disabled'}\n"
            f"• Timeout: {_seconds(config.timeout_ms)}s",
        )

    def _preview_confidence(self, value: str | None) -> None:
        config = self.state.preview_config
        if value is None:
            self.add_message(
                MessageType.ASSISTANT,
                f"Preview confidence threshold: {format_percent(config.confidence_threshold)}%",
            )
            return

        threshold = _parse_threshold(value)
        if threshold is None:
            self.add_message(
                MessageType.ERROR,
                "Confidence must be a number between 0-1 (e.g., 0.7) or 0-100 (e.g., 70).",
            )
            return
        if threshold < 0 or threshold > 1:
            self.add_message(
                MessageType.ERROR, "Confidence threshold must be between 0-1 (or 0-100)."
            )
            return

        self._update_preview_config(replace(config, confidence_threshold=threshold))
        self._add_system_message(
            f"Preview confidence threshold set to {format_percent(threshold)}%."
        )

    def _preview_timeout(self, value: str | None) -> None:
        config = self.state.preview_config
        if value is None:
            self.add_message(
                MessageType.ASSISTANT, f"Preview timeout: {_seconds(config.timeout_ms)}s"
            )
            return

        timeout = _parse_timeout(value)
        if timeout is None or timeout < 1:
            self.add_message(MessageType.ERROR, "Timeout must be a positive number (in seconds).")
            return

        self._update_preview_config(replace(config, timeout_ms=timeout * 1000))
        self._add_system_message(f"Preview timeout set to {timeout}s.")

    def _preview_auto(self, value: str | None) -> None:
        config = self.state.preview_config
        if value is None:
            state = "enabled" if config.auto_execute_high_confidence else "disabled"
            self.add_message(MessageType.ASSISTANT, f"Auto-execute high confidence: {state}")
            return

        if value in ("on", "true"):
            enabled = True
        elif value in ("off", "false"):
            enabled = False
        else:
            self.add_message(MessageType.ERROR, "Usage: /preview auto [on|off]")
            return

        self._update_preview_config(replace(config, auto_execute_high_confidence=enabled))
        self._add_system_message(
            f"Auto-execute for high confidence inputs {'enabled' if enabled else 'disabled'}."
        )

    def _update_preview_config(self, config) -> None:
        self.state.preview_config = config
        self._persist(save_preview_config, config)
