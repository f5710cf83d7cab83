"""Reusable screen components for the TUI application."""

from splitdiff.tui.screens.progress import LoadingScreen

__all__ = ["LoadingScreen"]
