"""Mixins for the TUI application."""

from splitdiff.tui.mixins.background_task import BackgroundTaskMixin
from splitdiff.tui.mixins.dual_pane import DualPaneMixin

__all__ = [
    "BackgroundTaskMixin",
    "DualPaneMixin",
]
