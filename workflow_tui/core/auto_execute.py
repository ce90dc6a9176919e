"""Preview / auto-execute decision policy.

Pure functions only.  The controller owns the countdown timer and the
state changes; this module decides what should happen and how the
countdown is presented.
"""

from __future__ import annotations

import math
from enum import Enum

from ..constants import (
    AUTO_EXECUTE_CONFIDENCE,
    COUNTDOWN_CALM_ABOVE_S,
    COUNTDOWN_TICK_MS,
    COUNTDOWN_URGENT_AT_OR_BELOW_S,
    PREVIEW_COMMAND_PREFIX,
)
from .models import Intent, PreviewConfig


class ExecutionDecision(Enum):
    IMMEDIATE = "immediate"
    AUTO_EXECUTE = "auto_execute"
    PREVIEW = "preview"


class PreviewKeyAction(Enum):
    CONFIRM = "confirm"
    CANCEL_PREVIEW = "cancel_preview"
    EDIT = "edit"
    CANCEL_COUNTDOWN = "cancel_countdown"


class CountdownUrgency(Enum):
    CALM = "calm"
    WARNING = "warning"
    URGENT = "urgent"


_CONFIRM_KEYS = frozenset({"enter", "return"})
_CANCEL_KEYS = frozenset({"escape", "esc"})


def is_preview_toggle(text: str) -> bool:
    return text.startswith(PREVIEW_COMMAND_PREFIX)


def qualifies_for_auto_execute(confidence: float) -> bool:
    """``confidence >= 0.95``; NaN never qualifies, infinities compare as-is."""
    return confidence >= AUTO_EXECUTE_CONFIDENCE


def decide(
    text: str,
    intent: Intent,
    preview_mode: bool,
    config: PreviewConfig,
) -> ExecutionDecision:
    """Choose between immediate execution, auto-execution and a preview."""
    if not preview_mode or is_preview_toggle(text):
        return ExecutionDecision.IMMEDIATE
    if config.auto_execute_high_confidence and qualifies_for_auto_execute(intent.confidence):
        return ExecutionDecision.AUTO_EXECUTE
    return ExecutionDecision.PREVIEW


def format_percent(confidence: float) -> str:
    """Render ``confidence * 100`` rounded half-up, tolerating inf/NaN."""
    value = confidence * 100
    if not math.isfinite(value):
        return str(value)
    return str(math.floor(value + 0.5))


def auto_execute_message(confidence: float) -> str:
    return (
        f"Auto-executing (confidence: {format_percent(confidence)}% "
        f"≥ {format_percent(AUTO_EXECUTE_CONFIDENCE)}%)"
    )


def timeout_message(timeout_ms: int) -> str:
    return f"Auto-executing after {math.ceil(timeout_ms / 1000)}s timeout"


def classify_key(key: str | None) -> PreviewKeyAction:
    """Classify a keystroke received while a preview is pending.

    Anything that is not Enter, Escape or ``e``/``E`` (modifier combos,
    unicode, the empty string) only cancels the countdown.
    """
    name = (key or "").lower()
    if name in _CONFIRM_KEYS:
        return PreviewKeyAction.CONFIRM
    if name in _CANCEL_KEYS:
        return PreviewKeyAction.CANCEL_PREVIEW
    if name == "e":
        return PreviewKeyAction.EDIT
    return PreviewKeyAction.CANCEL_COUNTDOWN


def tick_remaining(remaining_ms: int) -> int:
    """One countdown step: 100 ms less, never below zero."""
    return max(0, remaining_ms - COUNTDOWN_TICK_MS)


def countdown_seconds(remaining_ms: int) -> int:
    """Whole seconds shown for *remaining_ms* (ceiling)."""
    return max(0, math.ceil(remaining_ms / 1000))


def countdown_urgency(remaining_ms: int) -> CountdownUrgency:
    seconds = countdown_seconds(remaining_ms)
    if seconds > COUNTDOWN_CALM_ABOVE_S:
        return CountdownUrgency.CALM
    if seconds <= COUNTDOWN_URGENT_AT_OR_BELOW_S:
        return CountdownUrgency.URGENT
    return CountdownUrgency.WARNING
