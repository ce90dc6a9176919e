"""Package-wide logger.

Textual owns the terminal, so nothing is printed by default; the CLI
attaches a file handler when ``--log-file`` is given.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("workflow_tui")
logger.addHandler(logging.NullHandler())


def configure_file_logging(path: str, level: int = logging.DEBUG) -> None:
    """Send package log records to *path*."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
