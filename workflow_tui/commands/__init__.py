"""Slash-command handler mixins for SessionController."""

from .display_cmds import DisplayCommandsMixin  # noqa: F401
from .preview_cmds import PreviewCommandsMixin  # noqa: F401

__all__ = [
    "DisplayCommandsMixin",
    "PreviewCommandsMixin",
]
