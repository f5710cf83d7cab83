"""TUI views for the side-by-side diff viewer."""

from splitdiff.tui.views.diff_screen import DiffScreen

__all__ = ["DiffScreen"]
