"""Display-mode message filtering."""

from __future__ import annotations

from collections.abc import Sequence

from ..constants import MESSAGE_WINDOW
from .models import DisplayMode, Message, MessageType

_COMPACT_HIDDEN = frozenset({MessageType.SYSTEM, MessageType.TOOL})


def is_visible(message: Message, mode: DisplayMode) -> bool:
    """Return True if *message* should be shown in *mode*.

    - verbose: everything, including debug-tagged internal notes
    - normal: every message type; debug-tagged notes are hidden
    - compact: ``system`` and ``tool`` messages are hidden
    """
    if mode is DisplayMode.VERBOSE:
        return True
    if message.debug:
        return False
    if mode is DisplayMode.COMPACT:
        return message.type not in _COMPACT_HIDDEN
    return True


def visible_messages(
    messages: Sequence[Message],
    mode: DisplayMode,
    window: int = MESSAGE_WINDOW,
) -> tuple[Message, ...]:
    """Window *messages* to the most recent *window* entries, then filter.

    Truncation happens first, so filtering can only shrink the result;
    older messages never come back to fill the gap.
    """
    recent = messages[-window:] if window > 0 else []
    return tuple(m for m in recent if is_visible(m, mode))
