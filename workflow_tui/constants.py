"""Module-level constants for Workflow TUI."""

from __future__ import annotations

# Preview / auto-execute
AUTO_EXECUTE_CONFIDENCE = 0.95  # fixed; independent of the preview threshold
LOW_CONFIDENCE_NOTICE = 0.7
PREVIEW_COMMAND_PREFIX = "/preview"
COUNTDOWN_TICK_MS = 100
DEFAULT_PREVIEW_TIMEOUT_MS = 5000
DEFAULT_CONFIDENCE_THRESHOLD = 0.8

# Countdown colour thresholds, in whole seconds (ceil of remaining ms)
COUNTDOWN_CALM_ABOVE_S = 5
COUNTDOWN_URGENT_AT_OR_BELOW_S = 2

# Handoff animation
HANDOFF_DURATION_MS = 2000
HANDOFF_FADE_RATIO = 0.75
HANDOFF_FRAME_INTERVAL_MS = 100
HANDOFF_ARROW_FRAMES = 8

# Responsive layout breakpoints (terminal columns)
BREAKPOINT_COMPACT_MIN = 60
BREAKPOINT_NORMAL_MIN = 100
BREAKPOINT_WIDE_MIN = 160

# Message list
MESSAGE_WINDOW = 20
MAX_STORED_MESSAGES = 1000

# User-visible notices
MSG_PREVIEW_CANCELLED = "Preview cancelled."
MSG_COUNTDOWN_CANCELLED = "Auto-execute cancelled."
MSG_EDIT_MODE = "Returning to edit mode..."

DISPLAY_MODE_MESSAGES: dict[str, str] = {
    "compact": "Display mode set to compact: Single-line status, condensed output",
    "normal": "Display mode set to normal: Standard display with all components shown",
    "verbose": "Display mode set to verbose: Detailed debug output, full information",
}

# Slash commands handled by the controller itself; anything else is
# forwarded to the on_command callback.
SLASH_COMMANDS: tuple[str, ...] = (
    "/clear",
    "/compact",
    "/preview",
    "/preview auto",
    "/preview confidence",
    "/preview off",
    "/preview on",
    "/preview status",
    "/preview timeout",
    "/preview toggle",
    "/thoughts",
    "/thoughts off",
    "/thoughts on",
    "/thoughts status",
    "/verbose",
)
