"""Entry point for Workflow TUI CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from . import __version__
from .core.models import DisplayMode
from .log import configure_file_logging, logger
from .preferences import PREFS_PATH, load_preferences
from .workflows import YamlWorkflowLookup


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workflow TUI")
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"workflow-tui {__version__}",
    )
    parser.add_argument(
        "--workflows",
        "-w",
        type=Path,
        help="Directory of <workflow>.yaml stage definitions",
    )
    parser.add_argument(
        "--preview",
        dest="preview",
        action="store_true",
        default=None,
        help="Start with preview mode on",
    )
    parser.add_argument(
        "--no-preview",
        dest="preview",
        action="store_false",
        help="Start with preview mode off",
    )
    parser.add_argument(
        "--display-mode",
        choices=[m.value for m in DisplayMode],
        help="Initial display mode (default: from preferences)",
    )
    parser.add_argument(
        "--task-id",
        type=str,
        help="Only follow orchestrator events for this task",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write debug logs to this file",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run Workflow TUI."""
    args = build_parser().parse_args(argv)

    if args.log_file:
        configure_file_logging(args.log_file)

    prefs = load_preferences()
    if args.preview is not None:
        prefs.preview.enabled = args.preview
    if args.display_mode:
        prefs.display.mode = DisplayMode.parse(args.display_mode)

    workflows_dir = args.workflows or Path(prefs.workflows_dir).expanduser()
    logger.info("Starting Workflow TUI (workflows: %s)", workflows_dir)

    from .app import run_app

    run_app(
        workflow_lookup=YamlWorkflowLookup(workflows_dir),
        preferences=prefs,
        preferences_path=PREFS_PATH,
        task_id=args.task_id,
    )


if __name__ == "__main__":
    main()
