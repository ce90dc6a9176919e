"""Responsive layout breakpoints derived from terminal width."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from ..constants import BREAKPOINT_COMPACT_MIN, BREAKPOINT_NORMAL_MIN, BREAKPOINT_WIDE_MIN


class Breakpoint(Enum):
    NARROW = "narrow"
    COMPACT = "compact"
    NORMAL = "normal"
    WIDE = "wide"


@dataclass(frozen=True)
class BreakpointInfo:
    breakpoint: Breakpoint
    is_narrow: bool
    is_compact: bool
    is_normal: bool
    is_wide: bool


def _classify(width: object) -> Breakpoint:
    # Unknown widths get the most conservative layout.
    if isinstance(width, bool) or not isinstance(width, (int, float)):
        return Breakpoint.NARROW
    if math.isnan(width) or width < BREAKPOINT_COMPACT_MIN:
        return Breakpoint.NARROW
    if width < BREAKPOINT_NORMAL_MIN:
        return Breakpoint.COMPACT
    if width < BREAKPOINT_WIDE_MIN:
        return Breakpoint.NORMAL
    return Breakpoint.WIDE


def resolve(width: int | float | None) -> BreakpointInfo:
    """Map a terminal width in columns to a :class:`BreakpointInfo`.

    Never raises: ``None``, non-numbers, NaN and non-positive widths all
    resolve to ``narrow``.
    """
    bp = _classify(width)
    return BreakpointInfo(
        breakpoint=bp,
        is_narrow=bp is Breakpoint.NARROW,
        is_compact=bp is Breakpoint.COMPACT,
        is_normal=bp is Breakpoint.NORMAL,
        is_wide=bp is Breakpoint.WIDE,
    )
