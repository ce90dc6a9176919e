"""Textual widgets that render :class:`~workflow_tui.core.render.RenderState`."""

from .messages import MessageLog
from .panels import AgentPanel, ParallelPanel, PreviewPanel, StatusBar

__all__ = [
    "AgentPanel",
    "MessageLog",
    "ParallelPanel",
    "PreviewPanel",
    "StatusBar",
]
