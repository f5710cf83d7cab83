"""TUI widgets for the side-by-side diff viewer."""

from splitdiff.tui.widgets.diff_pane import DiffPane

__all__ = ["DiffPane"]
