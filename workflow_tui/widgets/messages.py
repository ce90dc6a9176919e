"""Message log widget."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from ..core.models import DisplayMode, Message, MessageType
from ..core.render import RenderState

_PREFIXES = {
    MessageType.USER: ("> ", "bold"),
    MessageType.ASSISTANT: ("", ""),
    MessageType.TOOL: ("⚙ ", "dim"),
    MessageType.SYSTEM: ("· ", "dim"),
    MessageType.ERROR: ("✗ ", "bold red"),
}


def format_message(message: Message, mode: DisplayMode) -> Text:
    prefix, style = _PREFIXES.get(message.type, ("", ""))
    text = Text()
    if mode is DisplayMode.VERBOSE:
        text.append(message.timestamp.strftime("[%H:%M:%S] "), style="dim")
    text.append(prefix, style=style)
    if message.type is MessageType.TOOL and message.tool_name:
        text.append(f"{message.tool_name}: ", style="dim")
    if message.agent and mode is not DisplayMode.COMPACT:
        text.append(f"{message.agent}: ", style="cyan")
    content = message.content
    if mode is DisplayMode.COMPACT:
        content = content.splitlines()[0] if content else ""
    text.append(content, style=style if message.type is not MessageType.USER else "")
    return text


def format_messages(render: RenderState) -> Text:
    return Text("\n").join(format_message(m, render.display_mode) for m in render.messages)


class MessageLog(Static):
    """The visible, filtered tail of the session's messages."""

    DEFAULT_CSS = """
    MessageLog {
        height: 1fr;
        padding: 0 1;
    }
    """

    def update_from(self, render: RenderState) -> None:
        self.update(format_messages(render))
