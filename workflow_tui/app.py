"""Textual front end for a :class:`SessionController`."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.suggester import SuggestFromList
from textual.timer import Timer
from textual.widgets import Input

from .constants import SLASH_COMMANDS
from .core.controller import SessionController
from .core.events import OrchestratorEvent
from .core.models import Intent, IntentType, MessageType
from .core.render import RenderState
from .log import logger
from .preferences import Preferences
from .widgets import AgentPanel, MessageLog, ParallelPanel, PreviewPanel, StatusBar
from .workflows import WorkflowLookup

_CSS = """
#main {
    height: 1fr;
}

#chat-area {
    height: 1fr;
}

#chat-input {
    dock: bottom;
    margin: 0 0 1 0;
}
"""


def default_classify(text: str) -> Intent:
    """Slash-prefixed input is a command; everything else a task."""
    stripped = text.strip()
    if stripped.startswith("/"):
        head, _, rest = stripped.partition(" ")
        return Intent(
            type=IntentType.COMMAND,
            confidence=1.0,
            command=head.lstrip("/").lower(),
            args=tuple(rest.split()),
        )
    return Intent(type=IntentType.TASK, confidence=0.8)


class TextualScheduler:
    """Scheduler backed by ``App.set_interval``."""

    def __init__(self, app: App) -> None:
        self._app = app

    @property
    def now(self) -> int:
        return int(time.monotonic() * 1000)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> Timer:
        return self._app.set_interval(max(1, interval_ms) / 1000, callback)


class WorkflowTuiApp(App):
    """Workflow TUI - watch agents hand off work, preview what you send."""

    CSS = _CSS
    TITLE = "Workflow TUI"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        *,
        workflow_lookup: WorkflowLookup | None = None,
        preferences: Preferences | None = None,
        preferences_path: Path | None = None,
        on_command: Callable[[str, Sequence[str]], None] | None = None,
        on_task: Callable[[str], None] | None = None,
        task_id: str | None = None,
        classify: Callable[[str], Intent] = default_classify,
    ) -> None:
        super().__init__()
        self._classify = classify
        self.controller = SessionController(
            TextualScheduler(self),
            on_command=on_command or self._default_command,
            on_task=on_task or self._default_task,
            workflow_lookup=workflow_lookup,
            preferences=preferences,
            preferences_path=preferences_path,
            task_id=task_id,
        )
        self._unsubscribe: Callable[[], None] | None = None

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Horizontal(id="main"):
            with Vertical(id="chat-area"):
                yield MessageLog(id="message-log")
                yield ParallelPanel(id="parallel-panel")
                yield PreviewPanel(id="preview-panel")
                yield Input(
                    placeholder="Type a task or /command",
                    suggester=SuggestFromList(SLASH_COMMANDS, case_sensitive=False),
                    id="chat-input",
                )
            yield AgentPanel(id="agent-panel")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self._unsubscribe = self.controller.subscribe(self._show_state)
        self.controller.resize(self.size.width)
        self.query_one("#chat-input", Input).focus()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.controller.dispose()

    # ── Input ───────────────────────────────────────────────────

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value
        if not text.strip():
            return
        event.input.value = ""
        self.controller.submit(text, self._classify(text))

    def on_key(self, event: events.Key) -> None:
        """While a preview is pending, every key belongs to the preview."""
        if self.controller.state.pending_preview is None:
            return
        if self.controller.handle_key(event.key) and not event.key.startswith("ctrl+"):
            event.stop()
            event.prevent_default()

    def on_resize(self, event: events.Resize) -> None:
        self.controller.resize(event.size.width)

    # ── Orchestrator bridge ─────────────────────────────────────

    def post_orchestrator_event(self, event: OrchestratorEvent) -> None:
        """Apply *event* on the UI thread; safe to call from any thread."""
        try:
            self.call_from_thread(self.controller.apply_event, event)
        except RuntimeError:
            # Already on the app's thread
            self.controller.apply_event(event)

    # ── Rendering ───────────────────────────────────────────────

    def _show_state(self, render: RenderState) -> None:
        try:
            self.query_one("#message-log", MessageLog).update_from(render)
            self.query_one("#parallel-panel", ParallelPanel).update_from(render)
            self.query_one("#preview-panel", PreviewPanel).update_from(render)
            self.query_one("#agent-panel", AgentPanel).update_from(render)
            self.query_one("#status-bar", StatusBar).update_from(render)
            input_widget = self.query_one("#chat-input", Input)
        except Exception:
            logger.debug("Render before widgets are mounted", exc_info=True)
            return

        waiting = render.pending_preview is not None
        if input_widget.disabled != waiting:
            input_widget.disabled = waiting
            if not waiting:
                input_widget.focus()
        if render.edit_mode_input is not None:
            text = self.controller.take_edit_input()
            if text is not None:
                input_widget.value = text
                input_widget.cursor_position = len(text)
                input_widget.focus()

    # ── Default callbacks ───────────────────────────────────────

    def _default_command(self, command: str, args: Sequence[str]) -> None:
        if command in ("quit", "exit"):
            self.exit()
            return
        self.controller.add_message(MessageType.ERROR, f"Unknown command: /{command}")

    def _default_task(self, text: str) -> None:
        self.controller.add_message(
            MessageType.SYSTEM, "Task submitted (no orchestrator attached)."
        )


def run_app(**kwargs: object) -> None:
    """Build and run the app; keyword arguments go to :class:`WorkflowTuiApp`."""
    WorkflowTuiApp(**kwargs).run()  # type: ignore[arg-type]
