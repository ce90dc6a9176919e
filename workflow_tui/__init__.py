"""Workflow TUI: terminal dashboard for multi-agent workflow sessions."""

__version__ = "0.1.0"
