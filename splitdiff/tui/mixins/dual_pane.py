"""
Dual Pane Mixin for the selector / left / right focus cycle.

Provides consistent focus behavior for screens that show a file selector
above two side-by-side panels:
- action_cycle_focus(): Move focus selector -> left -> right -> selector
- action_focus_left() / action_focus_right(): Jump straight to a panel
- _update_panel_styles(): Update active/inactive CSS classes on panels
- _focus_active_widget(): Abstract method subclasses must implement

Usage:
    class MyDualPaneScreen(DualPaneMixin, Screen):
        BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [...]

        def _focus_active_widget(self) -> None:
            # Focus the widget that belongs to self._active_panel
            ...
"""

from __future__ import annotations

from textual.binding import Binding


class DualPaneMixin:
    """Mixin for screens with a selector and left/right panels.

    Class Attributes:
        DUAL_PANE_BINDINGS: Focus cycling and quit bindings.
        FOCUS_CYCLE: Panel identifiers in focus-cycle order.
        PANEL_CONTAINERS: CSS selector of the container styled for each panel.
    """

    DUAL_PANE_BINDINGS = [
        Binding("tab", "cycle_focus", "Switch Focus", show=True, priority=True),
        Binding("[", "focus_left", "Left Panel", show=False),
        Binding("]", "focus_right", "Right Panel", show=False),
        Binding("q", "quit", "Quit", show=True),
    ]

    FOCUS_CYCLE: tuple[str, ...] = ("selector", "left", "right")

    PANEL_CONTAINERS: dict[str, str] = {
        "selector": "#file-select",
        "left": "#left-panel",
        "right": "#right-panel",
    }

    _active_panel: str = "selector"
    """Currently active panel identifier ('selector', 'left' or 'right')."""

    @property
    def is_left_active(self) -> bool:
        return self._active_panel == "left"

    @property
    def is_right_active(self) -> bool:
        return self._active_panel == "right"

    def _set_active_panel(self, panel: str) -> None:
        """Make panel the active one, restyle, and move focus to it."""
        self._active_panel = panel
        self._update_panel_styles()
        self._focus_active_widget()

    def action_cycle_focus(self) -> None:
        """Advance focus along FOCUS_CYCLE, wrapping around."""
        position = self.FOCUS_CYCLE.index(self._active_panel)
        self._set_active_panel(self.FOCUS_CYCLE[(position + 1) % len(self.FOCUS_CYCLE)])

    def action_focus_left(self) -> None:
        if self._active_panel != "left":
            self._set_active_panel("left")

    def action_focus_right(self) -> None:
        if self._active_panel != "right":
            self._set_active_panel("right")

    def action_quit(self) -> None:
        """Exit the application."""
        self.app.exit()

    def _update_panel_styles(self) -> None:
        """Mark the container of the active panel with the 'active' class.

        Containers come from PANEL_CONTAINERS; the ones a screen does not
        have are skipped.
        """
        for panel, selector in self.PANEL_CONTAINERS.items():
            for container in self.query(selector):
                container.set_class(panel == self._active_panel, "active")
                container.set_class(panel != self._active_panel, "inactive")

    def _focus_active_widget(self) -> None:
        """Focus the appropriate widget for the active panel.

        Subclasses must implement this method to define how focus
        is transferred when the active panel changes.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _focus_active_widget()"
        )
