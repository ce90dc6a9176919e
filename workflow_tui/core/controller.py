"""The session controller: single owner and mutator of :class:`SessionState`.

Input submission, preview keys, slash commands, orchestrator events and
terminal resizes all funnel through here.  After every change the
controller publishes one :class:`RenderState` to its subscribers; it never
talks to a UI framework directly.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Sequence

from ..commands import DisplayCommandsMixin, PreviewCommandsMixin
from ..constants import (
    COUNTDOWN_TICK_MS,
    LOW_CONFIDENCE_NOTICE,
    MAX_STORED_MESSAGES,
    MSG_COUNTDOWN_CANCELLED,
    MSG_EDIT_MODE,
    MSG_PREVIEW_CANCELLED,
)
from ..log import logger
from ..preferences import Preferences
from ..workflows import WorkflowLookup
from .auto_execute import (
    ExecutionDecision,
    PreviewKeyAction,
    auto_execute_message,
    classify_key,
    decide,
    format_percent,
    tick_remaining,
    timeout_message,
)
from .events import OrchestratorEvent
from .handoff import HandoffAnimator
from .models import (
    Intent,
    IntentType,
    Message,
    MessageType,
    PendingPreview,
    SessionState,
)
from .render import RenderState, build_render_state
from .scheduler import Scheduler, TimerHandle
from .sync import OrchestratorSynchronizer

CommandCallback = Callable[[str, Sequence[str]], None]
TaskCallback = Callable[[str], None]
Listener = Callable[[RenderState], None]


class SessionController(DisplayCommandsMixin, PreviewCommandsMixin):
    """Owns the session state, the countdown timer and the handoff animator.

    Args:
        scheduler: Source of repeating timers (Textual's ``set_interval``
            in the app, :class:`~workflow_tui.core.scheduler.ManualScheduler`
            headless).
        on_command: Called with ``(command, args)`` for slash commands that
            are not built in.
        on_task: Called with the raw input for every non-command intent.
        workflow_lookup: Resolves workflow names for stage → agent mapping.
        preferences: Initial display and preview settings.
        preferences_path: When set, setting changes are written back here.
        task_id: Only follow orchestrator events for this task.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_command: CommandCallback | None = None,
        on_task: TaskCallback | None = None,
        workflow_lookup: WorkflowLookup | None = None,
        preferences: Preferences | None = None,
        preferences_path: Path | None = None,
        task_id: str | None = None,
        handoff_duration_ms: int | None = None,
        frame_interval_ms: int | None = None,
    ) -> None:
        prefs = preferences or Preferences()
        self.state = SessionState(
            display_mode=prefs.display.mode,
            show_thoughts=prefs.display.show_thoughts,
            preview_mode=prefs.preview.enabled,
            preview_config=prefs.preview_config(),
        )
        self._scheduler = scheduler
        self._on_command = on_command
        self._on_task = on_task
        self._preferences_path = preferences_path
        self._synchronizer = OrchestratorSynchronizer(workflow_lookup, task_id=task_id)
        self._animator = HandoffAnimator(
            scheduler,
            duration_ms=handoff_duration_ms or prefs.handoff.duration_ms,
            frame_interval_ms=frame_interval_ms or prefs.handoff.frame_interval_ms,
            on_change=self._notify,
        )
        self._countdown: TimerHandle | None = None
        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._disposed = False
        self._builtins: dict[str, Callable[[str], None]] = {
            "/clear": self._cmd_clear,
            "/compact": self._cmd_compact,
            "/preview": self._cmd_preview,
            "/thoughts": self._cmd_thoughts,
            "/verbose": self._cmd_verbose,
        }

    # -- Observers ------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for render snapshots; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def render_state(self) -> RenderState:
        return build_render_state(self.state, self._animator.snapshot())

    @contextmanager
    def _batch(self) -> Iterator[None]:
        """Publish a single snapshot for all mutations inside the block."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        self._notify()

    def _notify(self) -> None:
        if self._disposed or self._batch_depth or not self._listeners:
            return
        snapshot = self.render_state()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.debug("Render listener failed", exc_info=True)

    # -- Input ----------------------------------------------------------------

    def submit(self, text: str, intent: Intent) -> None:
        """Run, auto-execute or preview *text* according to preview policy."""
        if self._disposed or not text.strip():
            return
        decision = decide(text, intent, self.state.preview_mode, self.state.preview_config)

        with self._batch():
            self.state.edit_mode_input = None
            if decision is ExecutionDecision.PREVIEW:
                # A newer preview replaces the pending one and restarts the countdown.
                self._stop_countdown()
                self.state.pending_preview = PendingPreview(input=text, intent=intent)
                self.state.remaining_ms = self.state.preview_config.timeout_ms
                self._countdown = self._scheduler.call_every(COUNTDOWN_TICK_MS, self._tick)
            else:
                # Running something new drops any preview still waiting.
                self._clear_preview()
                if decision is ExecutionDecision.AUTO_EXECUTE:
                    self._add_system_message(auto_execute_message(intent.confidence))
                self._execute(text, intent)

    def handle_key(self, key: str | None) -> bool:
        """Handle a keystroke while a preview is pending.

        Returns False (and does nothing) when no preview is pending.
        """
        pending = self.state.pending_preview
        if self._disposed or pending is None:
            return False

        action = classify_key(key)
        with self._batch():
            if action is PreviewKeyAction.CONFIRM:
                self._clear_preview()
                self._execute(pending.input, pending.intent)
            elif action is PreviewKeyAction.CANCEL_PREVIEW:
                self._clear_preview()
                self._add_system_message(MSG_PREVIEW_CANCELLED)
            elif action is PreviewKeyAction.EDIT:
                self._clear_preview()
                self.state.edit_mode_input = pending.input
                self._add_system_message(MSG_EDIT_MODE)
            elif self.state.remaining_ms is not None:
                # Countdown only; the preview stays up for Enter/Esc/e.
                self._stop_countdown()
                self.state.remaining_ms = None
                self._add_system_message(MSG_COUNTDOWN_CANCELLED)
        return True

    def take_edit_input(self) -> str | None:
        """Return and clear the text handed back by an edit request."""
        text = self.state.edit_mode_input
        if text is not None:
            self.state.edit_mode_input = None
            self._notify()
        return text

    def _tick(self) -> None:
        state = self.state
        if state.pending_preview is None or state.remaining_ms is None:
            self._stop_countdown()
            return
        with self._batch():
            state.remaining_ms = tick_remaining(state.remaining_ms)
            if state.remaining_ms == 0:
                pending = state.pending_preview
                self._clear_preview()
                self._add_system_message(timeout_message(state.preview_config.timeout_ms))
                self._execute(pending.input, pending.intent)

    def _clear_preview(self) -> None:
        self._stop_countdown()
        self.state.pending_preview = None
        self.state.remaining_ms = None

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.stop()
            self._countdown = None

    # -- Execution ------------------------------------------------------------

    def _execute(self, text: str, intent: Intent) -> None:
        """Route *text* to a built-in command, ``on_command`` or ``on_task``."""
        if intent.type is IntentType.COMMAND or text.startswith("/"):
            self._run_command(text, intent)
            return

        self.add_message(MessageType.USER, text)
        if intent.confidence < LOW_CONFIDENCE_NOTICE:
            self._add_system_message(
                f"Interpreting as {intent.type.value} "
                f"(confidence: {format_percent(intent.confidence)}%)"
            )
        if self._on_task is not None:
            if intent.type is IntentType.QUESTION:
                text = f"Answer this question: {text}"
            self._guarded(self._on_task, text)

    def _run_command(self, text: str, intent: Intent) -> None:
        parts = text.strip().split(None, 1)
        head = parts[0].lstrip("/").lower() if parts else ""
        command = "/" + (intent.command or head).lstrip("/").lower()
        if intent.args:
            args = list(intent.args)
            arg_text = " ".join(args)
        else:
            arg_text = parts[1] if len(parts) > 1 and "/" + head == command else ""
            args = arg_text.split()

        handler = self._builtins.get(command)
        if handler is not None:
            self._guarded(handler, arg_text)
        elif self._on_command is not None:
            self._guarded(self._on_command, command.lstrip("/"), tuple(args))
        else:
            self.add_message(MessageType.ERROR, f"Unknown command: {command}")

    def _guarded(self, callback: Callable[..., None], *args: object) -> None:
        self.state.is_processing = True
        try:
            callback(*args)
        except Exception as exc:
            logger.exception("Execution failed")
            self._add_system_message(f"Execution failed: {exc}")
        finally:
            self.state.is_processing = False

    # -- Orchestrator events --------------------------------------------------

    def apply_event(self, event: OrchestratorEvent) -> None:
        """Apply one orchestrator event and publish the result."""
        if self._disposed:
            return
        if not self._synchronizer.apply(self.state, event):
            return
        self._trim_messages()
        if self.state.active_agent is None:
            # Task over; the next first assignment is not a handoff.
            self._animator.reset()
        else:
            self._animator.observe(self.state.active_agent)
        self._notify()

    # -- Host-facing mutators -------------------------------------------------

    def add_message(
        self,
        type: MessageType,
        content: str,
        *,
        agent: str | None = None,
        tool_name: str | None = None,
        debug: bool = False,
    ) -> Message:
        message = Message(
            type=type, content=content, agent=agent, tool_name=tool_name, debug=debug
        )
        self.state.messages.append(message)
        self._trim_messages()
        self._notify()
        return message

    def _add_system_message(self, text: str) -> None:
        self.add_message(MessageType.SYSTEM, text)

    def resize(self, width: int | None) -> None:
        self.state.terminal_width = width
        self._notify()

    def set_processing(self, flag: bool) -> None:
        self.state.is_processing = bool(flag)
        self._notify()

    def _trim_messages(self) -> None:
        overflow = len(self.state.messages) - MAX_STORED_MESSAGES
        if overflow > 0:
            del self.state.messages[:overflow]

    def _persist(self, save: Callable[..., None], *args: object) -> None:
        if self._preferences_path is not None:
            save(*args, self._preferences_path)

    # -- Lifecycle ------------------------------------------------------------

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop every timer and drop subscribers.  Safe to call twice."""
        if self._disposed:
            return
        self._stop_countdown()
        self._animator.dispose()
        self._listeners.clear()
        self._disposed = True

    def __enter__(self) -> SessionController:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()
